from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.repositories.ichi_repository import ICHIRepository

logger = logging.getLogger(__name__)


def check_ichi_loaded(session: Session) -> bool:
    """Return True when the ICHI table has at least one row."""
    try:
        return ICHIRepository(session).count() > 0
    except SQLAlchemyError:
        logger.exception("Failed to check ICHI load state")
        return False
