# lcp/op/bytes.py
# Canonical encodings: LEB128 varints, framed labels, uint32_le label tables

from __future__ import annotations
from typing import Iterable, Sequence
import numpy as np
from .config import Label


def varu(n: int) -> bytes:
    """
    Encode unsigned integer as LEB128 varint.

    Args:
        n: unsigned integer (must be >= 0)

    Returns:
        bytes: LEB128 varint

    Raises:
        ValueError: if n < 0
        OverflowError: if n too large for LEB128
    """
    if n < 0:
        raise ValueError("varu expects unsigned (n >= 0)")

    if n >= (1 << 63):
        raise OverflowError(f"Integer {n} too large for safe LEB128 encoding")

    out = bytearray()
    while True:
        byte = n & 0x7F
        n >>= 7
        if n:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            break
    return bytes(out)


def frame_label(label: Label) -> bytes:
    """Label as <len><utf-8 bytes>, so concatenations stay unambiguous."""
    raw = label.encode("utf-8")
    return varu(len(raw)) + raw


def frame_alphabet(alphabet: Sequence[Label]) -> bytes:
    """
    Frame an ordered alphabet as <count><label_1>...<label_k>.

    The alphabet order defines the label indices used by
    to_bytes_configurations, so both must be hashed together.
    """
    out = bytearray(varu(len(alphabet)))
    for label in alphabet:
        out += frame_label(label)
    return bytes(out)


def alphabet_of(rows: Iterable[Sequence[Label]]) -> list[Label]:
    """Sorted set of labels occurring in rows."""
    return sorted({label for row in rows for label in row})


def to_bytes_configurations(
    rows: Sequence[Sequence[Label]],
    alphabet: Sequence[Label]
) -> bytes:
    """
    Encode configurations as label indices, uint32 little-endian.

    Each row is framed as <arity> followed by its label indices into
    alphabet, so rows of different arity never collide.

    Args:
        rows: configurations, encoded in the order given
        alphabet: ordered labels; every label in rows must occur in it

    Returns:
        bytes: <row_count> then per row <arity><uint32_le indices>

    Raises:
        KeyError: if a row holds a label missing from alphabet
    """
    index = {label: i for i, label in enumerate(alphabet)}

    out = bytearray(varu(len(rows)))
    for row in rows:
        ids = np.fromiter((index[label] for label in row), dtype=np.int64, count=len(row))
        out += varu(len(row))
        # Explicit little-endian dtype regardless of platform
        out += ids.astype(np.dtype("<u4")).tobytes(order="C")
    return bytes(out)
