# lcp/op/verify.py
# Soundness verifier and exhaustive brute-force oracle for LCP-maps

from __future__ import annotations
from itertools import permutations, product
from typing import Optional, Sequence, Tuple
from .check import expand_through
from .config import Configuration, Label, LCPMap, canonical, relation_from_map
from .receipts import VerifyRc


def verify_lcp(
    lcp_map: LCPMap,
    active_source: Sequence[Sequence[Label]],
    passive_source: Sequence[Sequence[Label]],
    active_target: Sequence[Sequence[Label]],
    passive_target: Sequence[Sequence[Label]],
    *,
    max_violations: int = 10
) -> Tuple[bool, VerifyRc]:
    """
    Check an LCP-map from scratch, independently of how it was found.

    Active side: every active source configuration has an entry of the
    same length whose labels, sorted, form an active target configuration.

    Passive side: with R = relation_from_map(lcp_map), every passive source
    configuration, with each slot replaced by each of its images under R in
    every combination, lands (sorted) in the passive target set.

    Returns:
        (ok, receipt)
    """
    violations: list[str] = []

    def note(msg: str) -> None:
        if len(violations) < max_violations:
            violations.append(msg)

    active_targets = {canonical(c) for c in active_target}
    active_ok = True
    for configuration in active_source:
        key = tuple(configuration)
        image = lcp_map.get(key)
        if image is None:
            active_ok = False
            note(f"missing entry for {key}")
            continue
        if len(image) != len(key):
            active_ok = False
            note(f"length mismatch {key} -> {image}")
            continue
        if canonical(image) not in active_targets:
            active_ok = False
            note(f"{key} -> {image} is not an active target configuration")

    if len(lcp_map) != len({tuple(c) for c in active_source}):
        active_ok = False
        note(f"map has {len(lcp_map)} entries for {len(active_source)} active source configurations")

    relation = relation_from_map(lcp_map)
    passive_targets = {canonical(c) for c in passive_target}
    passive_ok = True
    expansions = 0
    for configuration in passive_source:
        rows = expand_through({tuple(configuration)}, relation, len(configuration))
        for row in rows:
            expansions += 1
            if canonical(row) not in passive_targets:
                passive_ok = False
                note(f"passive {tuple(configuration)} -> {canonical(row)} is not a passive target configuration")

    rc = VerifyRc(
        active_ok=active_ok,
        passive_ok=passive_ok,
        active_checked=len(active_source),
        passive_checked=len(passive_source),
        expansions_checked=expansions,
        violations=violations,
    )
    return active_ok and passive_ok, rc


def _images(configuration: Configuration, active_target: Sequence[Sequence[Label]]) -> list[Configuration]:
    """Every distinct permutation of every same-arity target configuration, in input order."""
    seen: set[Configuration] = set()
    images = []
    for candidate in active_target:
        if len(candidate) != len(configuration):
            continue
        for perm in permutations(candidate):
            if perm not in seen:
                seen.add(perm)
                images.append(perm)
    return images


def exhaustive_lcp(
    active_source: Sequence[Sequence[Label]],
    passive_source: Sequence[Sequence[Label]],
    active_target: Sequence[Sequence[Label]],
    passive_target: Sequence[Sequence[Label]]
) -> Optional[LCPMap]:
    """
    Brute-force oracle: try every image choice for every source configuration.

    Exponential in everything; meant for cross-checking find_lcp on tiny
    problems. Returns the first valid map in product order, or None.
    """
    sources = list(dict.fromkeys(tuple(c) for c in active_source))
    choices = [_images(c, active_target) for c in sources]

    for combo in product(*choices):
        lcp_map = dict(zip(sources, combo))
        ok, _ = verify_lcp(lcp_map, sources, passive_source, active_target, passive_target, max_violations=0)
        if ok:
            return lcp_map
    return None
