from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from catsocial.domain.value_objects.cat_race import CatRace
from catsocial.domain.value_objects.cat_sex import CatSex
from catsocial.infrastructure.db.base import Base


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class CatORM(Base):
    __tablename__ = "cats"
    __table_args__ = (Index("ix_cats_user_created", "user_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(30), nullable=False)
    race: Mapped[CatRace] = mapped_column(
        Enum(CatRace, native_enum=False, length=32, values_callable=_enum_values),
        nullable=False,
    )
    sex: Mapped[CatSex] = mapped_column(
        Enum(CatSex, native_enum=False, length=6, values_callable=_enum_values),
        nullable=False,
    )
    age_in_month: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String(200), nullable=False)
    has_matched: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class CatImageORM(Base):
    __tablename__ = "cat_images"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    cat_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("cats.id"), nullable=False, index=True
    )
    image_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    # Order of the url inside the cat's list
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
