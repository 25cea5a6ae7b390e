# lcp/op/receipts.py
# Receipts kernel and environment fingerprinting

from __future__ import annotations
import platform
import sys
import json
from dataclasses import dataclass, asdict, field
from typing import Any
from .hash import hash_bytes


@dataclass
class EnvRc:
    """
    Environment fingerprint.

    Two runs are only comparable for determinism when their fingerprints
    agree.
    """
    platform: str
    endian: str
    py_version: str
    blake3_version: str
    numpy_version: str
    build_flags_hash: str


def _dist_version(name: str) -> str:
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version(name)
    except PackageNotFoundError:
        return "unknown"


def env_fingerprint() -> EnvRc:
    """
    Capture environment fingerprint for determinism checking.

    Returns:
        EnvRc: environment receipt
    """
    # Build flags hash: combine Python version and implementation
    build_info = {
        "py_version": sys.version,
        "implementation": platform.python_implementation(),
        "version_info": list(sys.version_info),
    }
    flags = hash_bytes(json.dumps(build_info, sort_keys=True).encode())

    return EnvRc(
        platform=platform.platform(),
        endian=sys.byteorder,
        py_version=platform.python_version(),
        blake3_version=_dist_version("blake3"),
        numpy_version=_dist_version("numpy"),
        build_flags_hash=flags,
    )


@dataclass
class ProblemRc:
    """
    Input receipt.

    Hashes are order-independent except active_source_order_hash and
    active_target_order_hash: the search visits active configurations in
    input order, so the verdict may depend on it.
    """
    name: str
    passive_degree: int
    counts: dict[str, int]                 # collection name -> #configurations
    hashes: dict[str, str]                 # collection name -> BLAKE3
    active_source_order_hash: str
    active_target_order_hash: str


@dataclass
class SearchRc:
    """
    Search statistics.

    Counters are updated in place while the search runs; they are
    bookkeeping only and never influence a branch decision.
    """
    passive_degree: int = 0
    checks: int = 0                  # check() calls
    accepted: int = 0                # Accept results
    noops: int = 0                   # NoOp results
    rejected: int = 0                # Reject results
    permutation_steps: int = 0       # permutation search entries
    configuration_steps: int = 0     # configuration search entries
    candidates_tried: int = 0        # (source config, target config) pairings started
    skipped_arity: int = 0           # pairings skipped for arity mismatch
    found: bool = False
    relation: dict[str, list[str]] = field(default_factory=dict)  # final relation, sorted


@dataclass
class VerifyRc:
    """
    Soundness verification receipt.

    violations holds readable descriptions, capped at max_violations.
    """
    active_ok: bool
    passive_ok: bool
    active_checked: int
    passive_checked: int              # passive source configurations expanded
    expansions_checked: int           # expanded configurations compared
    violations: list[str] = field(default_factory=list)


@dataclass
class RunRc:
    """
    Full run receipt for one problem.

    sections holds the per-stage receipts as plain dicts; hashes holds one
    BLAKE3 digest per section; table_hash digests the sorted
    "section:hash" lines.
    """
    problem: str
    env: EnvRc
    sections: dict[str, Any]
    hashes: dict[str, str]
    table_hash: str
    final: dict[str, Any]            # {status: "found"|"none", lcp_hash, entries}


def section_hash(section: Any) -> str:
    """BLAKE3 over the canonical JSON of a section receipt."""
    return hash_bytes(json.dumps(aggregate(section), sort_keys=True, separators=(",", ":")).encode())


def table_hash(hashes: dict[str, str]) -> str:
    """BLAKE3 over sorted "section:hash" lines."""
    lines = [f"{k}:{v}" for k, v in sorted(hashes.items())]
    return hash_bytes("\n".join(lines).encode())


def aggregate(run: Any) -> Any:
    """
    Convert nested receipts (dataclasses or dicts) to JSON-serializable data.

    Tuples become lists; dict keys that are tuples (configurations) become
    space-joined strings.

    Args:
        run: RunRc, any receipt dataclass, or dict containing receipts

    Returns:
        JSON-serializable representation
    """
    def key(k: Any) -> Any:
        if isinstance(k, tuple):
            return " ".join(str(v) for v in k)
        return k

    def to_plain(x: Any) -> Any:
        """Recursively convert dataclasses to dicts."""
        if hasattr(x, "__dataclass_fields__"):
            return {k: to_plain(v) for k, v in asdict(x).items()}
        if isinstance(x, dict):
            return {key(k): to_plain(v) for k, v in x.items()}
        if isinstance(x, (list, tuple)):
            return [to_plain(v) for v in x]
        if isinstance(x, (set, frozenset)):
            return sorted(to_plain(v) for v in x)
        return x

    return to_plain(run)
