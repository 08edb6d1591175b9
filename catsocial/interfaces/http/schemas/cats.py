from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from catsocial.domain.models.cat import (
    AGE_IN_MONTH_MAX,
    AGE_IN_MONTH_MIN,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    is_valid_image_url,
)
from catsocial.domain.value_objects.cat_race import CatRace
from catsocial.domain.value_objects.cat_sex import CatSex
from catsocial.interfaces.http.schemas.common import CamelModel


class CatRequest(CamelModel):
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    race: CatRace
    sex: CatSex
    age_in_month: int = Field(ge=AGE_IN_MONTH_MIN, le=AGE_IN_MONTH_MAX)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    image_urls: list[str] = Field(min_length=1)

    @field_validator("image_urls")
    @classmethod
    def validate_image_urls(cls, v: list[str]) -> list[str]:
        for idx, url in enumerate(v):
            if not is_valid_image_url(url):
                raise ValueError(f"invalid image URL [{idx}]: {url}")
        return v


class CatResponse(CamelModel):
    id: UUID
    name: str
    race: CatRace
    sex: CatSex
    age_in_month: int
    description: str
    image_urls: list[str]
    has_matched: bool
    created_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class CatSavedData(CamelModel):
    id: UUID
    created_at: datetime


class CatSavedResponse(CamelModel):
    message: str
    data: CatSavedData


class CatsListResponse(CamelModel):
    message: str
    data: list[CatResponse]
