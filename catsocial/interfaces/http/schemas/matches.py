from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from catsocial.domain.models.match import MESSAGE_MAX_LENGTH, MESSAGE_MIN_LENGTH
from catsocial.domain.value_objects.match_status import MatchStatus
from catsocial.interfaces.http.schemas.cats import CatResponse
from catsocial.interfaces.http.schemas.common import CamelModel


class MatchCreate(CamelModel):
    match_cat_id: UUID
    user_cat_id: UUID
    message: str = Field(min_length=MESSAGE_MIN_LENGTH, max_length=MESSAGE_MAX_LENGTH)


class MatchAction(CamelModel):
    match_id: UUID


class MatchSavedData(CamelModel):
    id: UUID
    created_at: datetime


class MatchSavedResponse(CamelModel):
    message: str
    data: MatchSavedData


class IssuerResponse(CamelModel):
    name: str
    email: EmailStr
    created_at: datetime


class MatchDetailResponse(CamelModel):
    id: UUID
    issued_by: IssuerResponse
    match_cat_detail: CatResponse
    user_cat_detail: CatResponse
    message: str
    status: MatchStatus
    created_at: datetime


class MatchesListResponse(CamelModel):
    message: str
    data: list[MatchDetailResponse]
