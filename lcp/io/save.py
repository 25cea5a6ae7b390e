# lcp/io/save.py
# JSONL receipt writer and reader

from __future__ import annotations
import json
import os
from typing import Any


def write_jsonl(path: str, records: list[Any], *, append: bool = False) -> None:
    """
    Write records as JSONL (one compact JSON object per line).

    Used for run receipts; append=True adds to an existing file.
    """
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "a" if append else "w") as f:
        for record in records:
            f.write(json.dumps(record, separators=(",", ":"), sort_keys=True) + "\n")


def load_jsonl(path: str) -> list[dict]:
    """Load JSONL file as list of records, skipping blank lines."""
    with open(path) as f:
        return [json.loads(line) for line in f if line.strip()]
