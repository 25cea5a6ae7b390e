# lcp/io/load_data.py
# Shorthand configuration files: parsing, expansion, normalization

"""
Text format, one configuration per line:

    ab (xy) c

Tokens are separated by spaces. Each token is a shorthand expression: every
character is a label on its own, and a parenthesized run is one label, so
"ab" means "a or b" and "(xy)" is the single label "xy". A line expands into
one configuration per combination of its tokens' labels. All lines must
have the same number of tokens.
"""

from __future__ import annotations
from pathlib import Path
from typing import Sequence
from lcp.op.config import Configuration, Label, Problem, normalize_configurations

INPUT_NAMES = ("active_source", "passive_source", "active_target", "passive_target")


def unravel_shorthand(expression: str) -> list[Label]:
    """
    Labels denoted by one shorthand expression, in order of appearance.

    Examples:
        >>> unravel_shorthand("ab(cd)")
        ['a', 'b', 'cd']

    Raises:
        ValueError: on nested or unbalanced parentheses, empty "()", or
            whitespace inside the expression
    """
    expanded: list[Label] = []
    i = 0
    while i < len(expression):
        ch = expression[i]
        if ch == "(":
            # Read the string between brackets as one label
            label = ""
            while True:
                i += 1
                if i >= len(expression):
                    raise ValueError("Missing ')'.")
                inner = expression[i]
                if inner == ")":
                    break
                if inner == "(":
                    raise ValueError("Unexpected '('.")
                if inner.isspace():
                    raise ValueError(f"Unexpected whitespace {inner}.")
                label += inner
            if not label:
                raise ValueError("Found an empty label ().")
            expanded.append(label)
        elif ch == ")":
            raise ValueError("Unexpected ')'.")
        elif ch.isspace():
            raise ValueError(f"Unexpected whitespace {ch}.")
        else:
            expanded.append(ch)
        i += 1
    return expanded


def expand_at_index(row: Sequence[str], index: int) -> list[list[str]]:
    """
    Unravel the shorthand at row[index] into one row per label.

    Tokens at other positions are left untouched.
    """
    return [
        list(row[:index]) + [label] + list(row[index + 1:])
        for label in unravel_shorthand(row[index])
    ]


def parse_configurations(text: str) -> list[Configuration]:
    """
    Parse a configuration file body into configurations.

    Args:
        text: file contents

    Returns:
        list of configurations (not normalized), in expansion order

    Raises:
        ValueError: if there is no non-empty row, row lengths differ, or a
            shorthand expression is malformed
    """
    rows = []
    for line in text.strip().split("\n"):
        tokens = [token for token in line.strip().split(" ") if token]
        if tokens:
            rows.append(tokens)

    if not rows:
        raise ValueError("No nonempty rows.")

    row_length = len(rows[0])
    for row in rows[1:]:
        if len(row) != row_length:
            raise ValueError(f"Mismatched row lengths: expected {row_length}, found {len(row)}.")

    for i in range(row_length):
        rows = [expanded for row in rows for expanded in expand_at_index(row, i)]

    return [tuple(row) for row in rows]


def simplify_parsed_input(rows: Sequence[Sequence[Label]]) -> list[Configuration]:
    """Sort each configuration, sort the collection, drop duplicates."""
    return normalize_configurations(rows)


def read_input_file(input_dir: str | Path, name: str) -> list[Configuration]:
    """
    Read and parse input_dir/name.

    Raises:
        ValueError: "Reading input <name> failed: ..." or
            "Parsing input <name> failed: ..."
    """
    path = Path(input_dir) / name
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Reading input {name} failed: {e}") from e

    try:
        return parse_configurations(text)
    except ValueError as e:
        raise ValueError(f"Parsing input {name} failed: {e}") from e


def load_problem(input_dir: str | Path, name: str | None = None) -> Problem:
    """
    Load the four configuration files of a problem, normalized.

    Expects active_source, passive_source, active_target and
    passive_target inside input_dir. Any reading or parsing failure is
    raised before anything else happens, so a partial problem is never
    returned.
    """
    collections = [simplify_parsed_input(read_input_file(input_dir, n)) for n in INPUT_NAMES]
    return Problem.from_rows(*collections, name=name or Path(input_dir).resolve().name)
