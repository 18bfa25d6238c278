"""ICHI Core FastAPI application.

Read-only lookup, search and browsing over the WHO International Classification
of Health Interventions (ICHI). Appointment booking and FHIR conversion live in
other services; they reference ICHI codes as opaque strings and call this API to
resolve them.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.clinical.ichi.router import router as ichi_router
from app.core.config import settings
from app.db.session import SessionLocal
from app.routers import health
from app.services.ichi_state import check_ichi_loaded

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    with SessionLocal() as db:
        if check_ichi_loaded(db):
            logger.info("Connected to ICHI database")
        else:
            logger.warning("ICHI table is empty or unavailable; run the bulk import before serving")
    yield


def create_app() -> FastAPI:
    _configure_logging()

    app = FastAPI(
        title="ICHI Core",
        version="0.1.0",
        description="Lookup and search APIs for the International Classification of Health Interventions.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(health.router, tags=["health"])
    app.include_router(ichi_router, prefix="/ichi", tags=["ICHI"])

    return app


app = create_app()
