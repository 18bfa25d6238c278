"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable, Generator, Iterable
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.db.models import Base, ICHIEntry
from app.db.session import get_db
from app.main import app

SAMPLE_ENTRIES = [
    {"code": "KBO", "block_id": "KB", "title": "Interventions on the digestive system", "class_kind": "block", "depth_in_kind": 3},
    {"code": "KBO.JB", "block_id": "KB", "title": "- Interventions on appendix", "class_kind": "category", "depth_in_kind": 2},
    {"code": "KBO.JB.AE", "block_id": "KB", "title": "- - Removal of appendix", "class_kind": "category", "depth_in_kind": 1},
    {"code": "SKA.DA.AA", "block_id": "SK", "title": "- - Drainage of abscess of skin", "class_kind": "category", "depth_in_kind": 1},
    {"code": "AAA.AA.AA", "block_id": "AA", "title": "100% oxygen therapy", "class_kind": "category", "depth_in_kind": 1},
    {"code": "AAA.AA.AB", "block_id": "AA", "title": "1000 unit dose therapy", "class_kind": "category", "depth_in_kind": 1},
    {"code": "IAA.BA.BC", "block_id": "IA", "title": "Imaging, x_ray guided", "class_kind": "category", "depth_in_kind": 1},
    {"code": "IAA.BA.BD", "block_id": "IA", "title": "Imaging, xyray guided", "class_kind": "category", "depth_in_kind": 1},
]


@pytest.fixture
def engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """A fresh SQLite file database with the ICHI schema."""
    engine = create_engine(f"sqlite:///{tmp_path / 'ichi.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seed(db: Session) -> Callable[[Iterable[dict]], list[ICHIEntry]]:
    """Insert entries given as dicts of model attributes."""

    def _seed(rows: Iterable[dict]) -> list[ICHIEntry]:
        entries = [ICHIEntry(**row) for row in rows]
        db.add_all(entries)
        db.commit()
        return entries

    return _seed


@pytest.fixture
def sample_db(db: Session, seed) -> Session:
    seed(SAMPLE_ENTRIES)
    return db


@pytest.fixture
def client(sample_db: Session, session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
