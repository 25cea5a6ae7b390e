# lcp/op/search.py
# Backtracking search for an LCP-map: permutation search + configuration search

"""
Depth-first search with chronological backtracking.

The work list holds the active source configurations still needing an
image; the last one is always the current one. For it, every active target
configuration is tried in input order, and for each, the target labels are
assigned to source slots one by one, every single pair going through
check(). The relation is extended by copy, so a failed branch leaves no
trace in its siblings. The first complete assignment wins.
"""

from __future__ import annotations
import sys
from dataclasses import dataclass
from typing import FrozenSet, Optional, Sequence, Tuple
from .check import Accept, Reject, check
from .config import Configuration, Label, LCPMap, Relation, canonical, passive_degree
from .receipts import SearchRc

# Extra frames on top of the search depth for check() and its helpers
RECURSION_HEADROOM = 200


@dataclass(frozen=True)
class _Context:
    """Everything constant over one search, plus the stats sink."""
    passive_source: FrozenSet[Configuration]
    passive_target: FrozenSet[Configuration]
    active_target: Tuple[Configuration, ...]
    passive_degree: int
    stats: SearchRc


def _try_permutations(
    ctx: _Context,
    relation: Relation,
    work: Tuple[Configuration, ...],
    remaining_targets: Tuple[Label, ...]
) -> Optional[Tuple[LCPMap, Configuration, Relation]]:
    """
    Assign the remaining target labels to the current source configuration.

    The slot filled next is len(remaining_targets) - 1, so slots are filled
    from the last to the first and the permutation comes back aligned with
    the source slots.

    Returns:
        (map for the rest of the work list, partial permutation, final
        relation) or None when no assignment fits
    """
    ctx.stats.permutation_steps += 1

    if not remaining_targets:
        found = _try_configurations(ctx, relation, work[:-1])
        if found is None:
            return None
        lcp_map, final_relation = found
        return lcp_map, (), final_relation

    source_label = work[-1][len(remaining_targets) - 1]

    for i, target_label in enumerate(remaining_targets):
        ctx.stats.checks += 1
        result = check(
            relation,
            source_label,
            target_label,
            ctx.passive_source,
            ctx.passive_target,
            ctx.passive_degree,
        )

        if isinstance(result, Reject):
            ctx.stats.rejected += 1
            continue

        if isinstance(result, Accept):
            ctx.stats.accepted += 1
            next_relation = result.relation
        else:
            ctx.stats.noops += 1
            next_relation = relation

        found = _try_permutations(
            ctx,
            next_relation,
            work,
            remaining_targets[:i] + remaining_targets[i + 1:],
        )
        if found is not None:
            lcp_map, partial, final_relation = found
            return lcp_map, partial + (target_label,), final_relation

    return None


def _try_configurations(
    ctx: _Context,
    relation: Relation,
    work: Tuple[Configuration, ...]
) -> Optional[Tuple[LCPMap, Relation]]:
    """
    Find images for every configuration of the work list.

    Returns:
        (map with one entry per work list configuration, final relation)
        or None
    """
    ctx.stats.configuration_steps += 1

    if not work:
        return {}, relation

    current = work[-1]
    for candidate in ctx.active_target:
        if len(candidate) != len(current):
            ctx.stats.skipped_arity += 1
            continue

        ctx.stats.candidates_tried += 1
        found = _try_permutations(ctx, relation, work, candidate)
        if found is not None:
            lcp_map, permutation, final_relation = found
            lcp_map[current] = permutation
            return lcp_map, final_relation

    return None


def search_lcp(
    active_source: Sequence[Sequence[Label]],
    passive_source: Sequence[Sequence[Label]],
    active_target: Sequence[Sequence[Label]],
    passive_target: Sequence[Sequence[Label]]
) -> Tuple[Optional[LCPMap], Optional[Relation], SearchRc]:
    """
    Search for an LCP-map and report how the search went.

    Contract:
    - passive_source must be non-empty with one shared arity (the passive
      degree); passive_target must use the same arity
    - passive configurations are re-sorted here, so the checker always
      sees canonical configurations
    - active configurations are used in the order given: active_source is
      worked from its last entry, active_target is tried from its first
    - deterministic: same inputs in the same order give the same result

    Args:
        active_source: active configurations of the source problem
        passive_source: passive configurations of the source problem
        active_target: active configurations of the target problem
        passive_target: passive configurations of the target problem

    Returns:
        (lcp_map, relation, receipt); lcp_map and relation are None when no
        LCP-map exists

    Raises:
        ValueError: on a passive arity precondition violation
    """
    degree = passive_degree(passive_source)
    for configuration in passive_target:
        if len(configuration) != degree:
            raise ValueError(
                f"MIXED_PASSIVE_DEGREE: passive target {tuple(configuration)} has arity "
                f"{len(configuration)}, passive degree is {degree}"
            )

    stats = SearchRc(passive_degree=degree)
    ctx = _Context(
        passive_source=frozenset(canonical(c) for c in passive_source),
        passive_target=frozenset(canonical(c) for c in passive_target),
        active_target=tuple(tuple(c) for c in active_target),
        passive_degree=degree,
        stats=stats,
    )

    work = tuple(tuple(c) for c in active_source)

    # One permutation frame per label plus one per configuration level
    old_limit = sys.getrecursionlimit()
    needed = sum(len(c) + 2 for c in work) + RECURSION_HEADROOM
    sys.setrecursionlimit(old_limit + needed)
    try:
        found = _try_configurations(ctx, {}, work)
    finally:
        sys.setrecursionlimit(old_limit)

    if found is None:
        return None, None, stats

    lcp_map, relation = found
    stats.found = True
    stats.relation = {source: sorted(targets) for source, targets in sorted(relation.items())}
    return lcp_map, relation, stats


def find_lcp(
    active_source: Sequence[Sequence[Label]],
    passive_source: Sequence[Sequence[Label]],
    active_target: Sequence[Sequence[Label]],
    passive_target: Sequence[Sequence[Label]]
) -> Optional[LCPMap]:
    """
    First LCP-map from the source problem to the target problem, or None.

    The map has one entry per active source configuration; each value is
    the chosen target labels, aligned slot by slot with its key.
    """
    lcp_map, _, _ = search_lcp(active_source, passive_source, active_target, passive_target)
    return lcp_map
