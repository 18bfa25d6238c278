"""SQLAlchemy engine and session management.

Each request gets its own session from a pooled engine; reads never share a
connection handle across requests.
"""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings


def build_engine(uri: str) -> Engine:
    if uri.startswith("sqlite"):
        return create_engine(uri, connect_args={"check_same_thread": False})

    return create_engine(
        uri,
        pool_pre_ping=True,
        pool_recycle=1800,
        pool_size=5,
        max_overflow=10,
    )


engine = build_engine(settings.sqlalchemy_database_uri)

SessionLocal = sessionmaker(
    bind=engine,
    class_=Session,
    expire_on_commit=False,
    autoflush=False,
)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
