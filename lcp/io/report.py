# lcp/io/report.py
# Console rendering of configurations, relations and LCP-maps

from __future__ import annotations
from typing import Optional, Sequence
from lcp.op.config import Label, LCPMap, Relation

NO_MAP_MESSAGE = "No LCP-map exists."


def format_configuration(configuration: Sequence[Label]) -> str:
    return " ".join(configuration)


def format_configurations(rows: Sequence[Sequence[Label]]) -> str:
    """One configuration per line, labels separated by spaces."""
    return "\n".join(format_configuration(row) for row in rows)


def format_lcp_map(lcp_map: Optional[LCPMap]) -> str:
    """
    Render "a b -> y x" lines, sorted by source configuration.

    Each image is printed in slot order of its source, so column i on the
    right is the image of column i on the left.
    """
    if lcp_map is None:
        return NO_MAP_MESSAGE
    return "\n".join(
        f"{format_configuration(source)} -> {format_configuration(lcp_map[source])}"
        for source in sorted(lcp_map)
    )


def format_relation(relation: Optional[Relation]) -> str:
    """Render "a -> x y" lines, one per source label."""
    if not relation:
        return ""
    return "\n".join(
        f"{source} -> {' '.join(sorted(relation[source]))}"
        for source in sorted(relation)
    )
