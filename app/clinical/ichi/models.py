"""ICHI SQLAlchemy models for ICHI Core.

Column names follow the upstream WHO linearization extract (``Code``,
``BlockId``, ``Title``, ``ClassKind``, ``DepthInKind``) so a database produced
by the bulk import can be opened as-is.
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

ICHI_TABLE = "ICHI"


class ICHIEntry(Base):
    __tablename__ = ICHI_TABLE

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column("Code", String, nullable=False, unique=True, index=True)
    block_id: Mapped[str | None] = mapped_column("BlockId", String, nullable=True)
    title: Mapped[str] = mapped_column("Title", Text, nullable=False)
    class_kind: Mapped[str | None] = mapped_column("ClassKind", String, nullable=True)
    depth_in_kind: Mapped[int] = mapped_column("DepthInKind", Integer, nullable=False, default=1, index=True)

    def __repr__(self) -> str:
        return f"ICHIEntry(code={self.code!r}, depth_in_kind={self.depth_in_kind!r})"
