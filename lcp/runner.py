#!/usr/bin/env python3
# lcp/runner.py
# Problem runner + determinism harness

"""
Pipeline per problem:

    inputs receipt -> search -> verify -> (optional) exhaustive cross-check

Every stage leaves a section receipt and a BLAKE3 hash of it; table_hash
digests all section hashes. Running the pipeline twice on the same problem
must reproduce every hash.
"""

from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict, Optional, Tuple

from lcp.op.config import LCPMap, Problem, passive_degree
from lcp.op.hash import hash_configurations, hash_lcp_map, hash_relation
from lcp.op.receipts import ProblemRc, RunRc, env_fingerprint, section_hash, table_hash
from lcp.op.search import search_lcp
from lcp.op.verify import exhaustive_lcp, verify_lcp
from lcp.io.load_data import INPUT_NAMES
from lcp.io.report import format_lcp_map, format_relation


def problem_receipt(problem: Problem) -> ProblemRc:
    """
    Receipt of the four input collections.

    Raises:
        ValueError: if the passive source is empty or of mixed arity
    """
    collections = dict(zip(INPUT_NAMES, problem.collections()))
    return ProblemRc(
        name=problem.name,
        passive_degree=passive_degree(problem.passive_source),
        counts={k: len(v) for k, v in collections.items()},
        hashes={k: hash_configurations(v) for k, v in collections.items()},
        active_source_order_hash=hash_configurations(problem.active_source, ordered=True),
        active_target_order_hash=hash_configurations(problem.active_target, ordered=True),
    )


def solve_problem(
    problem: Problem,
    *,
    verbose: bool = False,
    cross_check: bool = False
) -> Tuple[Optional[LCPMap], RunRc]:
    """
    Search one problem for an LCP-map, with receipts.

    Args:
        problem: normalized source and target problems
        verbose: print [LCP] progress lines
        cross_check: also run the exhaustive oracle (tiny problems only)

    Returns:
        (lcp_map or None, run receipt)

    Raises:
        ValueError: if the problem violates the passive arity preconditions
            (fail-closed, nothing is searched)
    """
    env = env_fingerprint()
    sections: Dict[str, Any] = {}
    hashes: Dict[str, str] = {}

    # ========================================================================
    # Step 1: inputs
    # ========================================================================

    problem_rc = problem_receipt(problem)
    sections["inputs"] = asdict(problem_rc)
    hashes["inputs"] = section_hash(sections["inputs"])

    if verbose:
        counts = ", ".join(f"{k}={v}" for k, v in problem_rc.counts.items())
        print(f"[LCP] {problem.name}: {counts}, passive degree {problem_rc.passive_degree}")

    # ========================================================================
    # Step 2: search
    # ========================================================================

    lcp_map, relation, search_rc = search_lcp(*problem.collections())
    sections["search"] = asdict(search_rc)
    hashes["search"] = section_hash(sections["search"])

    if verbose:
        print(
            f"[LCP] search: found={search_rc.found} checks={search_rc.checks} "
            f"accepted={search_rc.accepted} noops={search_rc.noops} rejected={search_rc.rejected}"
        )
        if relation is not None:
            print("[LCP] relation:")
            print(format_relation(relation))

    # ========================================================================
    # Step 3: verify (independent re-check of the returned map)
    # ========================================================================

    if lcp_map is not None:
        ok, verify_rc = verify_lcp(lcp_map, *problem.collections())
        sections["verify"] = asdict(verify_rc)
        if not ok:
            # The search only returns maps its checker accepted; a failure
            # here means the two disagree.
            raise ValueError(f"UNSOUND_LCP_MAP: {verify_rc.violations}")
    else:
        sections["verify"] = {"status": "not_needed"}
    hashes["verify"] = section_hash(sections["verify"])

    # ========================================================================
    # Step 4: exhaustive cross-check (optional)
    # ========================================================================

    cross_status = "not_run"
    if cross_check:
        oracle = exhaustive_lcp(*problem.collections())
        agree = (oracle is None) == (lcp_map is None)
        cross_status = "agree" if agree else "disagree"
        sections["cross_check"] = {
            "status": cross_status,
            "oracle_found": oracle is not None,
            "oracle_lcp_hash": hash_lcp_map(oracle),
        }
        hashes["cross_check"] = section_hash(sections["cross_check"])
        if verbose:
            print(f"[LCP] cross-check: {cross_status}")

    final = {
        "status": "found" if lcp_map is not None else "none",
        "lcp_hash": hash_lcp_map(lcp_map),
        "relation_hash": hash_relation(relation) if relation is not None else None,
        "entries": len(lcp_map) if lcp_map is not None else 0,
        "cross_check": cross_status,
    }

    if verbose:
        print("[LCP] result:")
        print(format_lcp_map(lcp_map))

    run_rc = RunRc(
        problem=problem.name,
        env=env,
        sections=sections,
        hashes=hashes,
        table_hash=table_hash(hashes),
        final=final,
    )
    return lcp_map, run_rc


def run_with_determinism(
    problem: Problem,
    *,
    cross_check: bool = False,
    verbose: bool = False
) -> Tuple[Dict[str, Any], Optional[LCPMap], Optional[RunRc]]:
    """
    Run solve_problem() twice and compare everything.

    Only the first run prints progress when verbose. Its map and receipt are
    returned alongside the summary, so callers need no extra run; both are
    None when the run raised.

    Returns:
        (summary, lcp_map, run receipt), summary being
        {
            "problem": str,
            "result": "PASS" | "NONDETERMINISTIC_EXECUTION" | "NONDETERMINISTIC_ENV"
                      | "CROSS_CHECK_MISMATCH" | "ERROR",
            "status": "found" | "none" | None,
            "lcp_hash": str | None,
            "table_hash_run1": str | None,
            "table_hash_run2": str | None,
            "error": str | None
        }
    """
    summary: Dict[str, Any] = {
        "problem": problem.name,
        "result": "PASS",
        "status": None,
        "lcp_hash": None,
        "table_hash_run1": None,
        "table_hash_run2": None,
        "error": None,
    }

    try:
        map1, rc1 = solve_problem(problem, verbose=verbose, cross_check=cross_check)
        map2, rc2 = solve_problem(problem, cross_check=cross_check)
    except Exception as e:
        summary["result"] = "ERROR"
        summary["error"] = str(e)
        return summary, None, None

    summary["status"] = rc1.final["status"]
    summary["lcp_hash"] = rc1.final["lcp_hash"]
    summary["table_hash_run1"] = rc1.table_hash
    summary["table_hash_run2"] = rc2.table_hash

    if rc1.env != rc2.env:
        summary["result"] = "NONDETERMINISTIC_ENV"
        summary["error"] = "Environment fingerprints differ between runs"
        return summary, map1, rc1

    if rc1.hashes != rc2.hashes:
        diff_sections = [k for k in rc1.hashes if rc1.hashes.get(k) != rc2.hashes.get(k)]
        summary["result"] = "NONDETERMINISTIC_EXECUTION"
        summary["error"] = f"Section hashes differ between runs: {diff_sections}"
        return summary, map1, rc1

    if rc1.table_hash != rc2.table_hash or map1 != map2:
        summary["result"] = "NONDETERMINISTIC_EXECUTION"
        summary["error"] = "Results differ between runs"
        return summary, map1, rc1

    if rc1.final["cross_check"] == "disagree":
        summary["result"] = "CROSS_CHECK_MISMATCH"
        summary["error"] = "Exhaustive oracle disagrees with the search verdict"

    return summary, map1, rc1
