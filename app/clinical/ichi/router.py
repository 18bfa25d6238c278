"""FastAPI router for ICHI.

Endpoints:
- GET /ichi/search?q=...&limit=...&depth=...
- GET /ichi/{code}
- GET /ichi?limit=...&offset=...&sort=Code|Title

``/search`` is declared before ``/{code}`` so it is never captured as a code.
Handlers are plain functions; FastAPI runs them in its thread pool, so a slow
search does not hold up unrelated lookups.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.repositories.ichi_repository import ICHIRepository
from app.schemas.ichi import (
    ErrorResponse,
    ICHIEntryResponse,
    ICHIListResponse,
    ICHISearchResponse,
    ICHISearchResult,
)
from app.services.ichi_query_service import (
    ICHICodeNotFoundError,
    ICHIQueryService,
    ICHIQueryValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _error(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    content: dict[str, str] = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def get_query_service(db: Session = Depends(get_db)) -> ICHIQueryService:
    return ICHIQueryService(repository=ICHIRepository(db))


@router.get("/search", response_model=ICHISearchResponse, responses=_ERROR_RESPONSES)
def search(
    q: str | None = Query(default=None, description="Free-text term matched against display titles"),
    limit: int | None = Query(default=None, description="Clamped to [1, 1000]; defaults to 100"),
    depth: int | None = Query(default=settings.search_default_depth, ge=1, description="DepthInKind filter; 1 is the searchable leaf level"),
    service: ICHIQueryService = Depends(get_query_service),
):
    try:
        envelope = service.search(q, limit=limit, depth_in_kind=depth)
    except ICHIQueryValidationError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except SQLAlchemyError as exc:
        logger.exception("ICHI search failed q=%r", q)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Search failed", str(exc))

    return ICHISearchResponse(
        query=envelope.query,
        limit=envelope.limit,
        depth_in_kind=envelope.depth_in_kind,
        count=envelope.count,
        results=[ICHISearchResult(title=r.title, code=r.code) for r in envelope.results],
    )


@router.get("/{code}", response_model=ICHIEntryResponse, responses=_ERROR_RESPONSES)
def get_by_code(code: str, service: ICHIQueryService = Depends(get_query_service)):
    try:
        entry = service.get_entry(code)
    except ICHIQueryValidationError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except ICHICodeNotFoundError:
        return _error(status.HTTP_404_NOT_FOUND, "Code not found")
    except SQLAlchemyError as exc:
        logger.exception("ICHI lookup failed code=%r", code)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch code", str(exc))

    return ICHIEntryResponse.from_entry(entry)


@router.get("", response_model=ICHIListResponse, responses=_ERROR_RESPONSES)
def list_entries(
    limit: int | None = Query(default=None),
    offset: int | None = Query(default=None),
    sort: str | None = Query(default=None, description="Code or Title; anything else sorts by Code"),
    service: ICHIQueryService = Depends(get_query_service),
):
    try:
        envelope = service.list_entries(limit=limit, offset=offset, sort=sort)
    except SQLAlchemyError as exc:
        logger.exception("ICHI list failed")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to query ICHI database", str(exc))

    return ICHIListResponse(
        count=envelope.count,
        limit=envelope.limit,
        offset=envelope.offset,
        sort=envelope.sort,
        results=[ICHIEntryResponse.from_entry(e) for e in envelope.results],
    )
