from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.clinical.ichi.models import ICHIEntry
from app.services.search_normalization import LIKE_ESCAPE, TITLE_PADDING_CHARS

MAX_LIMIT = 1000
SORT_FIELDS = ("Code", "Title")
DEFAULT_SORT = "Code"


@dataclass
class TitleMatch:
    title: str
    code: str


def clamp_limit(limit: int | None, default: int = 100, maximum: int = MAX_LIMIT) -> int:
    if limit is None:
        return default
    return max(1, min(int(limit), maximum))


def clamp_offset(offset: int | None) -> int:
    if offset is None:
        return 0
    return max(int(offset), 0)


def coerce_sort_field(sort_field: str | None) -> str:
    return sort_field if sort_field in SORT_FIELDS else DEFAULT_SORT


class ICHIRepository:
    """Read-mostly access to the ICHI classification table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    @staticmethod
    def display_title_expr():
        return func.ltrim(ICHIEntry.title, TITLE_PADDING_CHARS)

    def get_by_code(self, code: str) -> Optional[ICHIEntry]:
        stmt = select(ICHIEntry).where(ICHIEntry.code == code).limit(1)
        return self.db.execute(stmt).scalar_one_or_none()

    def count(self) -> int:
        return int(self.db.execute(select(func.count()).select_from(ICHIEntry)).scalar_one())

    def list_entries(self, *, limit: int, offset: int = 0, sort_field: str = DEFAULT_SORT) -> list[ICHIEntry]:
        sort_column = ICHIEntry.title if coerce_sort_field(sort_field) == "Title" else ICHIEntry.code
        stmt = (
            select(ICHIEntry)
            .order_by(sort_column.asc(), ICHIEntry.code.asc(), ICHIEntry.id.asc())
            .limit(clamp_limit(limit))
            .offset(clamp_offset(offset))
        )
        return list(self.db.execute(stmt).scalars().all())

    def search_title(
        self,
        pattern: str,
        *,
        limit: int,
        depth_filter: int | None = None,
    ) -> list[TitleMatch]:
        """Match ``pattern`` (an already escaped LIKE pattern) against display titles."""
        display_title = self.display_title_expr()
        stmt = select(display_title.label("title"), ICHIEntry.code.label("code")).where(
            display_title.ilike(pattern, escape=LIKE_ESCAPE)
        )
        if depth_filter is not None:
            stmt = stmt.where(ICHIEntry.depth_in_kind == depth_filter)
        stmt = stmt.order_by(ICHIEntry.code.asc()).limit(clamp_limit(limit))

        rows = self.db.execute(stmt).all()
        return [TitleMatch(title=r.title, code=r.code) for r in rows]

    def all_entries(self) -> Sequence[ICHIEntry]:
        stmt = select(ICHIEntry).order_by(ICHIEntry.code.asc(), ICHIEntry.id.asc())
        return self.db.execute(stmt).scalars().all()

    def update_code(self, entry_id: int, new_code: str) -> int:
        stmt = update(ICHIEntry).where(ICHIEntry.id == entry_id).values(code=new_code)
        result = self.db.execute(stmt)
        return result.rowcount
