# lcp/op/hash.py
# BLAKE3 hashing helpers for configurations, relations and LCP-maps

from __future__ import annotations
from typing import Sequence
from blake3 import blake3
from .bytes import alphabet_of, frame_alphabet, frame_label, to_bytes_configurations, varu
from .config import Label, LCPMap, Relation, canonical


def hash_bytes(b: bytes) -> str:
    """
    Hash bytes with BLAKE3, return hex digest.

    Args:
        b: bytes to hash

    Returns:
        str: hex digest (64 hex chars = 256 bits)
    """
    return blake3(b).hexdigest()


def hash_configurations(rows: Sequence[Sequence[Label]], *, ordered: bool = False) -> str:
    """
    Hash a configuration collection.

    By default the hash ignores row order and label order within rows
    (rows are canonicalised and sorted first). With ordered=True the rows
    are hashed exactly as given, which is what the search depends on.
    """
    if not ordered:
        rows = sorted(canonical(row) for row in rows)
    alphabet = alphabet_of(rows)
    return hash_bytes(frame_alphabet(alphabet) + to_bytes_configurations(rows, alphabet))


def hash_relation(relation: Relation) -> str:
    """Hash a label relation; independent of dict and set iteration order."""
    payload = bytearray(varu(len(relation)))
    for source in sorted(relation):
        targets = sorted(relation[source])
        payload += frame_label(source)
        payload += frame_alphabet(targets)
    return hash_bytes(bytes(payload))


def hash_lcp_map(lcp_map: LCPMap | None) -> str:
    """
    Hash an LCP-map, entries ordered by source configuration.

    None (no map) hashes to a fixed sentinel digest distinct from the
    empty map.
    """
    if lcp_map is None:
        return hash_bytes(b"\x00none")

    keys = sorted(lcp_map)
    rows = []
    for key in keys:
        rows.append(key)
        rows.append(lcp_map[key])
    alphabet = alphabet_of(rows)
    return hash_bytes(b"\x01map" + frame_alphabet(alphabet) + to_bytes_configurations(rows, alphabet))
