"""Hierarchy repair for ICHI entries carrying flat legacy codes.

A flat code such as ``HFA`` is re-attached to the hierarchy by looking for an
entry whose title contains the candidate's title and whose code extends the
candidate's code; the candidate then takes the first two segments of that
entry's code (``HFA.BA.01`` -> ``HFA.BA``).

The plan is computed from a snapshot of the table taken before any write and
each correction is committed in its own transaction, so a failed row is rolled
back on its own and the run carries on with the remaining candidates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from app.repositories.ichi_repository import ICHIRepository
from app.services.ichi_hierarchy import (
    derive_corrected_code,
    broken_chains,
    duplicate_codes,
    find_repair_parent,
    is_flat_code,
)

logger = logging.getLogger(__name__)

CORRECTED = "corrected"
UNRESOLVED = "unresolved"
FAILED = "failed"


@dataclass
class RepairOutcome:
    entry_id: int
    code: str
    title: str
    status: str
    corrected_code: Optional[str] = None
    parent_code: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class RepairSummary:
    dry_run: bool = False
    scanned: int = 0
    candidates: int = 0
    corrected: list[RepairOutcome] = field(default_factory=list)
    unresolved: list[RepairOutcome] = field(default_factory=list)
    failed: list[RepairOutcome] = field(default_factory=list)

    def record(self, outcome: RepairOutcome) -> None:
        {
            CORRECTED: self.corrected,
            UNRESOLVED: self.unresolved,
            FAILED: self.failed,
        }[outcome.status].append(outcome)

    @property
    def corrections(self) -> dict[str, str]:
        return {o.code: o.corrected_code for o in self.corrected if o.corrected_code}

    def as_dict(self) -> dict:
        def _rows(items: list[RepairOutcome]) -> list[dict]:
            return [
                {
                    "id": o.entry_id,
                    "code": o.code,
                    "title": o.title,
                    "corrected_code": o.corrected_code,
                    "parent_code": o.parent_code,
                    "reason": o.reason,
                }
                for o in items
            ]

        return {
            "dry_run": self.dry_run,
            "scanned": self.scanned,
            "candidates": self.candidates,
            "corrected": _rows(self.corrected),
            "unresolved": _rows(self.unresolved),
            "failed": _rows(self.failed),
        }


class ICHIRepairService:
    def __init__(self, repository: ICHIRepository) -> None:
        self.repository = repository

    def plan(self) -> tuple[list[RepairOutcome], int]:
        """Return the outcome of every repair candidate without writing anything."""
        entries = list(self.repository.all_entries())
        taken = {e.code for e in entries}

        duplicates = duplicate_codes(entries)
        if duplicates:
            logger.warning("ICHI table already holds duplicate codes: %s", ", ".join(duplicates))
        for prefix, code in broken_chains(entries):
            logger.warning("DepthInKind does not increase from %s to %s", prefix, code)

        outcomes: list[RepairOutcome] = []
        for entry in entries:
            if not is_flat_code(entry.code):
                continue

            parent = find_repair_parent(entry, entries)
            if parent is None:
                outcomes.append(
                    RepairOutcome(
                        entry_id=entry.id,
                        code=entry.code,
                        title=entry.title,
                        status=UNRESOLVED,
                        reason="no parent entry matches title and code prefix",
                    )
                )
                continue

            corrected_code = derive_corrected_code(parent.code)
            if corrected_code in taken:
                outcomes.append(
                    RepairOutcome(
                        entry_id=entry.id,
                        code=entry.code,
                        title=entry.title,
                        status=UNRESOLVED,
                        corrected_code=corrected_code,
                        parent_code=parent.code,
                        reason="code already exists",
                    )
                )
                continue

            taken.discard(entry.code)
            taken.add(corrected_code)
            outcomes.append(
                RepairOutcome(
                    entry_id=entry.id,
                    code=entry.code,
                    title=entry.title,
                    status=CORRECTED,
                    corrected_code=corrected_code,
                    parent_code=parent.code,
                )
            )

        return outcomes, len(entries)

    def run(self, *, dry_run: bool = False) -> RepairSummary:
        outcomes, scanned = self.plan()
        summary = RepairSummary(dry_run=dry_run, scanned=scanned, candidates=len(outcomes))
        db = self.repository.db

        logger.info("ichi repair started scanned=%s candidates=%s dry_run=%s", scanned, len(outcomes), dry_run)

        for outcome in outcomes:
            if outcome.status == UNRESOLVED:
                logger.info("Unresolved %s (%s): %s", outcome.code, outcome.title, outcome.reason)
                summary.record(outcome)
                continue

            logger.info("Fixing %s (%s) -> %s", outcome.code, outcome.title, outcome.corrected_code)
            if dry_run:
                summary.record(outcome)
                continue

            try:
                updated = self.repository.update_code(outcome.entry_id, outcome.corrected_code)
                if updated != 1:
                    raise LookupError(f"entry id={outcome.entry_id} no longer exists")
                db.commit()
            except (SQLAlchemyError, LookupError) as exc:
                db.rollback()
                logger.exception("Failed to update %s -> %s", outcome.code, outcome.corrected_code)
                outcome.status = FAILED
                outcome.reason = str(exc)
            summary.record(outcome)

        logger.info(
            "ichi repair done corrected=%s unresolved=%s failed=%s dry_run=%s",
            len(summary.corrected),
            len(summary.unresolved),
            len(summary.failed),
            dry_run,
        )
        return summary
