#!/usr/bin/env python3
"""One-time migration: rewrite stored ``date:content`` memos as ``date|time|content``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Allow running from the repo root without installing.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from memo_codec import ColonCodec, MemoEncodeError, PipeCodec  # noqa: E402
from memo_store import MemoStore  # noqa: E402
import firestore_prefs  # noqa: E402


def migrate(key: str = "memos", *, dry_run: bool = False, prefs=firestore_prefs) -> int:
    """Re-encode the memos stored under *key* in the pipe format.

    Records the legacy decoder cannot parse are dropped, as are memos whose
    content holds a ``|``. Returns the number of memos written (or that
    would be written).
    """
    raw = prefs.get_string(key)
    if not raw:
        print(f"No memos stored under {key!r}.")
        return 0

    legacy = MemoStore.deserialize(raw, codec=ColonCodec())
    migrated = MemoStore(codec=PipeCodec())
    for memo in legacy:
        try:
            migrated.add(memo)
        except MemoEncodeError as exc:
            print(f"Skipping {memo.date.isoformat()}: {exc}")
    if dry_run:
        for memo in migrated:
            print(f"[dry-run] Would migrate: {memo.date.isoformat()}  {memo.content}")
    else:
        prefs.set_string(key, migrated.serialize())
        print(f"Migrated {len(migrated)} memos under {key!r}")
    return len(migrated)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Convert legacy date:content memos to the date|time|content format",
    )
    parser.add_argument(
        "--key", default="memos",
        help="Preference key holding the memos",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print what would be migrated without writing",
    )
    args = parser.parse_args()

    count = migrate(args.key, dry_run=args.dry_run)
    print(f"\nTotal: {count} memos {'would be ' if args.dry_run else ''}migrated.")


if __name__ == "__main__":
    main()
