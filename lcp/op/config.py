# lcp/op/config.py
# Configuration model: labels, configurations, relations, LCP-maps

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Sequence, Tuple

Label = str
Configuration = Tuple[Label, ...]
Relation = Dict[Label, FrozenSet[Label]]
LCPMap = Dict[Configuration, Configuration]


def canonical(configuration: Sequence[Label]) -> Configuration:
    """Sorted tuple form; two configurations are equal iff their canonical forms are."""
    return tuple(sorted(configuration))


def normalize_configurations(rows: Iterable[Sequence[Label]]) -> list[Configuration]:
    """
    Sort labels within each row, sort the rows, drop duplicates.

    Args:
        rows: configurations in any order, labels in any order

    Returns:
        list of canonical configurations in ascending order, no repeats
    """
    return sorted({canonical(row) for row in rows})


def passive_degree(passive_source: Sequence[Sequence[Label]]) -> int:
    """
    Arity shared by all passive source configurations.

    Raises:
        ValueError: if passive_source is empty or arities differ
    """
    if not passive_source:
        raise ValueError("EMPTY_PASSIVE_SOURCE: no passive source configurations.")

    degree = len(passive_source[0])
    for configuration in passive_source:
        if len(configuration) != degree:
            raise ValueError(
                f"MIXED_PASSIVE_DEGREE: expected arity {degree}, "
                f"found {len(configuration)} in {tuple(configuration)}"
            )
    return degree


def extend_relation(relation: Relation, source: Label, target: Label) -> Relation:
    """Copy of relation with target added to the images of source."""
    extended = dict(relation)
    extended[source] = relation.get(source, frozenset()) | {target}
    return extended


def relation_from_map(lcp_map: LCPMap) -> Relation:
    """Label relation witnessed slot by slot by an LCP-map."""
    images: dict[Label, set[Label]] = {}
    for source_configuration, image in lcp_map.items():
        for source, target in zip(source_configuration, image):
            images.setdefault(source, set()).add(target)
    return {source: frozenset(targets) for source, targets in images.items()}


@dataclass
class Problem:
    """
    Source and target labeling problems for one search.

    Collections are kept in the order given; the loader hands them over
    normalized.
    """
    active_source: Tuple[Configuration, ...]
    passive_source: Tuple[Configuration, ...]
    active_target: Tuple[Configuration, ...]
    passive_target: Tuple[Configuration, ...]
    name: str = field(default="problem")

    @classmethod
    def from_rows(
        cls,
        active_source: Iterable[Sequence[Label]],
        passive_source: Iterable[Sequence[Label]],
        active_target: Iterable[Sequence[Label]],
        passive_target: Iterable[Sequence[Label]],
        name: str = "problem",
    ) -> "Problem":
        return cls(
            active_source=tuple(tuple(row) for row in active_source),
            passive_source=tuple(tuple(row) for row in passive_source),
            active_target=tuple(tuple(row) for row in active_target),
            passive_target=tuple(tuple(row) for row in passive_target),
            name=name,
        )

    def collections(self) -> Tuple[
        Tuple[Configuration, ...],
        Tuple[Configuration, ...],
        Tuple[Configuration, ...],
        Tuple[Configuration, ...],
    ]:
        """(active_source, passive_source, active_target, passive_target)"""
        return self.active_source, self.passive_source, self.active_target, self.passive_target
