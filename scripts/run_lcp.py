#!/usr/bin/env python3
# scripts/run_lcp.py
# Search one problem directory for an LCP-map, with determinism check and receipts

"""
Reads the four configuration files (active_source, passive_source,
active_target, passive_target) from the input directory, prints the
normalized inputs and the LCP-map found (or that none exists), and appends
the run receipt to a JSONL file.

Usage:
    python scripts/run_lcp.py [--input-dir DIR] [--output PATH] [--cross-check] [--quiet]
"""

from __future__ import annotations
import os
import sys
from pathlib import Path

# Add project root to path
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from lcp.runner import solve_problem, run_with_determinism
from lcp.io.load_data import INPUT_NAMES, load_problem
from lcp.io.report import format_configurations, format_lcp_map
from lcp.io.save import write_jsonl
from lcp.op.receipts import aggregate

DEFAULT_INPUT_DIR = os.getenv("LCP_INPUT_DIR", "input")
DEFAULT_OUTPUT = "out/receipts/lcp_run.jsonl"


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Find an LCP-map between two labeling problems")
    parser.add_argument("--input-dir", type=str, default=DEFAULT_INPUT_DIR,
                        help="Directory holding the four configuration files (env LCP_INPUT_DIR)")
    parser.add_argument("--output", type=str, default=DEFAULT_OUTPUT, help="Receipts JSONL path")
    parser.add_argument("--cross-check", action="store_true",
                        help="Also run the exhaustive oracle (tiny problems only)")
    parser.add_argument("--no-determinism", action="store_true", help="Skip the second run")
    parser.add_argument("--quiet", action="store_true", help="Only print the result")

    args = parser.parse_args()

    try:
        problem = load_problem(args.input_dir)
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(1)

    if not args.quiet:
        print("Parsed input:")
        for name, rows in zip(INPUT_NAMES, problem.collections()):
            print(name)
            print(format_configurations(rows))
            print()

    determinism = None
    if args.no_determinism:
        try:
            lcp_map, run_rc = solve_problem(problem, verbose=not args.quiet, cross_check=args.cross_check)
        except ValueError as e:
            print(f"❌ {e}")
            sys.exit(1)
    else:
        # The first of the two runs is the one reported
        determinism, lcp_map, run_rc = run_with_determinism(
            problem, cross_check=args.cross_check, verbose=not args.quiet
        )
        if run_rc is None:
            print(f"❌ {determinism['error']}")
            sys.exit(1)

    if args.quiet:
        print(format_lcp_map(lcp_map))

    record = aggregate(run_rc)
    if determinism is not None:
        record["determinism"] = determinism

    write_jsonl(args.output, [record], append=True)
    if not args.quiet:
        print(f"\nReceipt appended to: {args.output}")

    if determinism is not None and determinism["result"] != "PASS":
        print(f"\n❌ {determinism['result']}: {determinism['error']}")
        sys.exit(1)
    if run_rc.final["cross_check"] == "disagree":
        print("\n❌ CROSS_CHECK_MISMATCH")
        sys.exit(1)


if __name__ == "__main__":
    main()
