"""Repair flat legacy ICHI codes in place.

Usage:
    python -m app.scripts.repair_ichi_codes [--dry-run] [--json] [--database-url URL]

Run it while the API is stopped, or accept that readers see either the old or
the new code of an entry while the run is in progress. Exit status is 0 when
every candidate was corrected, 1 when some were unresolved or failed.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from sqlalchemy.orm import Session, sessionmaker

from app.db.session import SessionLocal, build_engine
from app.repositories.ichi_repository import ICHIRepository
from app.services.ichi_repair_service import ICHIRepairService, RepairSummary

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def repair_ichi_codes(*, dry_run: bool = False, database_url: str | None = None) -> RepairSummary:
    if database_url:
        factory = sessionmaker(bind=build_engine(database_url), class_=Session, autoflush=False)
    else:
        factory = SessionLocal

    db: Session = factory()
    try:
        return ICHIRepairService(repository=ICHIRepository(db)).run(dry_run=dry_run)
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Infer hierarchical codes for ICHI entries with flat legacy codes")
    parser.add_argument("--dry-run", action="store_true", help="Report planned corrections without writing")
    parser.add_argument("--json", action="store_true", help="Print the run summary as JSON")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    _configure_logging()
    summary = repair_ichi_codes(dry_run=args.dry_run, database_url=args.database_url)

    if args.json:
        print(json.dumps(summary.as_dict(), indent=2, ensure_ascii=False))

    return 0 if not summary.unresolved and not summary.failed else 1


if __name__ == "__main__":
    sys.exit(main())
