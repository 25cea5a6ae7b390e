#!/usr/bin/env python3
# scripts/check_receipts.py
# Compare two LCP run receipt files (e.g. from two machines)

from __future__ import annotations
import sys
from pathlib import Path

repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from lcp.io.save import load_jsonl

# Fields that must agree; env may differ between machines and only warns
COMPARED_FIELDS = ("problem", "hashes", "table_hash", "final")


def diff_records(a: dict, b: dict) -> list[str]:
    """
    Differences between two run receipts on the compared fields.

    Section hashes are compared one by one, so the report names the stage
    that diverged first.
    """
    diffs = []
    for key in COMPARED_FIELDS:
        val_a, val_b = a.get(key), b.get(key)
        if key == "hashes" and isinstance(val_a, dict) and isinstance(val_b, dict):
            for section in sorted(set(val_a) | set(val_b)):
                if val_a.get(section) != val_b.get(section):
                    diffs.append(f"hashes.{section}: {val_a.get(section)!r} != {val_b.get(section)!r}")
        elif val_a != val_b:
            diffs.append(f"{key}: {val_a!r} != {val_b!r}")
    return diffs


def main():
    """
    Usage:
        python scripts/check_receipts.py <file1.jsonl> <file2.jsonl>

    Exit codes:
        0: receipts match
        1: receipts differ
    """
    if len(sys.argv) != 3:
        print("Usage: python scripts/check_receipts.py <file1.jsonl> <file2.jsonl>")
        sys.exit(1)

    records_a = load_jsonl(sys.argv[1])
    records_b = load_jsonl(sys.argv[2])

    if len(records_a) != len(records_b):
        print(f"✗ RECEIPTS_DIFFER: record count mismatch ({len(records_a)} vs {len(records_b)})")
        sys.exit(1)

    all_match = True
    for i, (rec_a, rec_b) in enumerate(zip(records_a, records_b)):
        if rec_a.get("env") != rec_b.get("env"):
            print(f"⚠️  record {i}: environment fingerprints differ")
        diffs = diff_records(rec_a, rec_b)
        if diffs:
            all_match = False
            print(f"\n✗ Differences in record {i} ({rec_a.get('problem')}):")
            for diff in diffs:
                print(f"  {diff}")

    if all_match:
        print(f"✓ RECEIPTS_MATCH ({len(records_a)} records)")
        return

    print("\n✗ RECEIPTS_DIFFER")
    sys.exit(1)


if __name__ == "__main__":
    main()
