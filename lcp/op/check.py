# lcp/op/check.py
# Compatibility check: can one source->target pair join the relation?

from __future__ import annotations
from dataclasses import dataclass
from typing import AbstractSet, Union
from .config import Configuration, Label, Relation, extend_relation


@dataclass(frozen=True)
class NoOp:
    """The pair is already in the relation; nothing to verify."""


@dataclass(frozen=True)
class Accept:
    """The pair is compatible; relation is the extended copy."""
    relation: Relation


@dataclass(frozen=True)
class Reject:
    """Adding the pair would map some passive configuration outside the target set."""


CheckResult = Union[NoOp, Accept, Reject]

NOOP = NoOp()
REJECT = Reject()


def _remove_one(configuration: Configuration, label: Label) -> Configuration:
    """Drop the first occurrence of label, keeping the order of the rest."""
    i = configuration.index(label)
    return configuration[:i] + configuration[i + 1:]


def reduced_configurations(
    configurations: AbstractSet[Configuration],
    label: Label
) -> set[Configuration]:
    """Configurations containing label, with one occurrence of it removed."""
    return {_remove_one(c, label) for c in configurations if label in c}


def expand_through(
    rows: set[Configuration],
    relation: Relation,
    width: int
) -> set[Configuration]:
    """
    Replace every slot of every row by each image of its label.

    Slots are rewritten one at a time (a fold over positions), so slot i
    still holds its source label when it is reached. A row containing a
    label with no image disappears.
    """
    for index in range(width):
        rows = {
            row[:index] + (target,) + row[index + 1:]
            for row in rows
            for target in relation.get(row[index], ())
        }
    return rows


def check(
    relation: Relation,
    source_label: Label,
    target_label: Label,
    passive_source: AbstractSet[Configuration],
    passive_target: AbstractSet[Configuration],
    passive_degree: int
) -> CheckResult:
    """
    Decide whether source_label -> target_label may be added to relation.

    Contract:
    - relation is assumed compatible already; only configurations that use
      the new pair are examined
    - passive configurations must be canonical (sorted labels)
    - the input relation is never mutated

    Algorithm:
    1. Pair already present -> NoOp
    2. relation' = relation + pair
    3. S = passive source configs holding source_label, one occurrence removed
       T = passive target configs holding target_label, one occurrence removed
    4. Expand every slot of S through relation', sort each result
    5. Accept(relation') iff the expansion is a subset of T

    Removing one occurrence on each side fixes that slot to the new pair;
    since configurations are multisets, this covers every placement of it.

    Args:
        relation: current source label -> target labels relation
        source_label: label of the source problem
        target_label: proposed image of source_label
        passive_source: canonical passive source configurations
        passive_target: canonical passive target configurations
        passive_degree: arity of every passive configuration

    Returns:
        NoOp, Accept(extended relation) or Reject
    """
    if target_label in relation.get(source_label, ()):
        return NOOP

    extended = extend_relation(relation, source_label, target_label)

    source_rows = reduced_configurations(passive_source, source_label)
    target_rows = reduced_configurations(passive_target, target_label)

    generated = expand_through(source_rows, extended, passive_degree - 1)
    generated = {tuple(sorted(row)) for row in generated}

    if generated <= target_rows:
        return Accept(extended)
    return REJECT
