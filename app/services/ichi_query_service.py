from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.clinical.ichi.models import ICHIEntry
from app.core.config import settings
from app.repositories.ichi_repository import (
    MAX_LIMIT,
    ICHIRepository,
    TitleMatch,
    clamp_limit,
    clamp_offset,
    coerce_sort_field,
)
from app.services.search_normalization import contains_pattern, display_title, normalize_term

MISSING_QUERY_MESSAGE = "Missing query parameter q"
MISSING_CODE_MESSAGE = "Missing code parameter"


class ICHIQueryValidationError(ValueError):
    pass


class ICHICodeNotFoundError(LookupError):
    pass


@dataclass
class SearchEnvelope:
    query: str
    limit: int
    depth_in_kind: Optional[int]
    count: int
    results: list[TitleMatch]


@dataclass
class ListEnvelope:
    limit: int
    offset: int
    sort: str
    count: int
    results: list[ICHIEntry]


class ICHIQueryService:
    def __init__(
        self,
        repository: ICHIRepository,
        *,
        default_limit: int | None = None,
        max_limit: int | None = None,
    ) -> None:
        self.repository = repository
        self.default_limit = default_limit or settings.search_default_limit
        self.max_limit = min(max_limit or settings.search_max_limit, MAX_LIMIT)

    def effective_limit(self, limit: int | None) -> int:
        return clamp_limit(limit, default=self.default_limit, maximum=self.max_limit)

    def search(
        self,
        query: str | None,
        *,
        limit: int | None = None,
        depth_in_kind: int | None = 1,
    ) -> SearchEnvelope:
        term = normalize_term(query)
        if not term:
            raise ICHIQueryValidationError(MISSING_QUERY_MESSAGE)

        effective_limit = self.effective_limit(limit)
        matches = self.repository.search_title(
            contains_pattern(term),
            limit=effective_limit,
            depth_filter=depth_in_kind,
        )
        results = [TitleMatch(title=display_title(m.title), code=m.code) for m in matches]
        return SearchEnvelope(
            query=term,
            limit=effective_limit,
            depth_in_kind=depth_in_kind,
            count=len(results),
            results=results,
        )

    def get_entry(self, code: str | None) -> ICHIEntry:
        c = (code or "").strip()
        if not c:
            raise ICHIQueryValidationError(MISSING_CODE_MESSAGE)

        entry = self.repository.get_by_code(c)
        if entry is None:
            raise ICHICodeNotFoundError(c)
        return entry

    def list_entries(
        self,
        *,
        limit: int | None = None,
        offset: int | None = None,
        sort: str | None = None,
    ) -> ListEnvelope:
        effective_limit = self.effective_limit(limit)
        effective_offset = clamp_offset(offset)
        sort_field = coerce_sort_field(sort)

        rows = self.repository.list_entries(limit=effective_limit, offset=effective_offset, sort_field=sort_field)
        return ListEnvelope(
            limit=effective_limit,
            offset=effective_offset,
            sort=sort_field,
            count=len(rows),
            results=rows,
        )
