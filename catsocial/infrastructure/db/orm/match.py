from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from catsocial.infrastructure.db.base import Base


class MatchORM(Base):
    __tablename__ = "matches"
    __table_args__ = (
        # One active match per unordered pair of cats
        Index(
            "ux_matches_active_pair",
            "pair_key",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    match_cat_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("cats.id"), nullable=False, index=True
    )
    user_cat_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("cats.id"), nullable=False, index=True
    )
    message: Mapped[str] = mapped_column(String(120), nullable=False)
    pair_key: Mapped[str] = mapped_column(String(80), nullable=False)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
