"""List or delete jacket image sets that no book references anymore.

Usage:
    python -m scripts.sweep_orphan_jackets [--jackets-root PATH] [--delete]

A stem is orphaned when its files are on disk but no book's `jacket` field
points at it: a replaced upload whose old files could not be removed, the
loser of two concurrent uploads, or a run that crashed half way. Without
--delete the script only reports what it would remove.
"""

from __future__ import annotations

import argparse
import logging
import time
from typing import Iterable, List, Optional

from db import SessionLocal, init_db
from repositories import BooksRepository
from settings import settings
from storage.file_storage import JacketStorage

logger = logging.getLogger("sweep_orphan_jackets")


def stem_created_ns(stem: str) -> Optional[int]:
    """Creation time embedded in a `jacket_<book_id>_<ns>` stem."""
    _, _, suffix = stem.rpartition("_")
    return int(suffix) if suffix.isdigit() else None


def find_orphan_stems(
    storage: JacketStorage,
    active_stems: Iterable[str],
    min_age_seconds: float = 0,
    now_ns: Optional[int] = None,
) -> List[str]:
    """
    Stems present under the storage root that are not in `active_stems`.

    Stems younger than `min_age_seconds` are skipped: they may belong to an
    upload still being processed.
    """
    active = set(active_stems)
    now_ns = now_ns if now_ns is not None else time.time_ns()
    cutoff = now_ns - int(min_age_seconds * 1_000_000_000)
    orphans = []
    for stem in storage.list_stems():
        if stem in active:
            continue
        created = stem_created_ns(stem)
        if created is not None and created > cutoff:
            continue
        orphans.append(stem)
    return sorted(orphans)


def sweep(
    storage: JacketStorage,
    active_stems: Iterable[str],
    delete: bool = False,
    min_age_seconds: float = 0,
) -> List[str]:
    orphans = find_orphan_stems(storage, active_stems, min_age_seconds=min_age_seconds)
    for stem in orphans:
        if delete:
            removed = storage.delete_stem(stem)
            logger.info("deleted %s (%d files)", stem, removed)
        else:
            logger.info("orphan %s", stem)
    return orphans


def main() -> int:
    if not logger.handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
    parser = argparse.ArgumentParser(description="Find jacket images no book references.")
    parser.add_argument("--jackets-root", default=str(settings.JACKETS_ROOT))
    parser.add_argument("--delete", action="store_true", help="Remove orphaned files instead of only listing them.")
    parser.add_argument("--min-age", type=float, default=3600, help="Skip stems created less than this many seconds ago.")
    args = parser.parse_args()

    storage = JacketStorage(args.jackets_root)
    init_db()
    with SessionLocal() as session:
        active = BooksRepository().list_jacket_stems(session)

    orphans = sweep(storage, active, delete=args.delete, min_age_seconds=args.min_age)
    logger.info("%d orphaned jacket set(s)%s", len(orphans), " removed" if args.delete else "")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
