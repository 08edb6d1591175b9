from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from catsocial.application.errors import ValidationError
from catsocial.application.services.cat_catalog import CatCatalog, CatInput
from catsocial.domain.models.cat import Cat
from catsocial.domain.value_objects.cat_query import CatQuery
from catsocial.infrastructure.auth.context import AuthContext
from catsocial.interfaces.http.deps import get_auth_context, get_cat_catalog
from catsocial.interfaces.http.schemas.cats import (
    CatRequest,
    CatResponse,
    CatSavedData,
    CatSavedResponse,
    CatsListResponse,
)
from catsocial.interfaces.http.schemas.common import MessageResponse

router = APIRouter(prefix="/cat", tags=["cats"])


def _to_input(payload: CatRequest) -> CatInput:
    return CatInput(
        name=payload.name,
        race=payload.race.value,
        sex=payload.sex.value,
        age_in_month=payload.age_in_month,
        description=payload.description,
        image_urls=list(payload.image_urls),
    )


def _to_response(cat: Cat) -> CatResponse:
    return CatResponse.model_validate(cat)


@router.get("", response_model=CatsListResponse)
async def list_cats(
    id: str | None = Query(default=None),
    limit: int | None = Query(default=None, ge=0),
    offset: int | None = Query(default=None, ge=0),
    race: str | None = Query(default=None),
    sex: str | None = Query(default=None),
    has_matched: str | None = Query(default=None, alias="hasMatched"),
    age_in_month: str | None = Query(default=None, alias="ageInMonth"),
    owned: str | None = Query(default=None),
    search: str | None = Query(default=None),
    context: AuthContext = Depends(get_auth_context),
    catalog: CatCatalog = Depends(get_cat_catalog),
) -> CatsListResponse:
    cat_id = None
    if id:
        try:
            cat_id = UUID(id)
        except ValueError:
            # No cat can carry a malformed id
            return CatsListResponse(message="Success", data=[])
    try:
        query = CatQuery.parse(
            id=cat_id,
            race=race,
            sex=sex,
            has_matched=has_matched,
            age_in_month=age_in_month,
            owned=owned,
            search=search,
            limit=limit,
            offset=offset,
        )
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    cats = await catalog.list_cats(context.user_id, query)
    return CatsListResponse(message="Success", data=[_to_response(cat) for cat in cats])


@router.post("", response_model=CatSavedResponse, status_code=status.HTTP_201_CREATED)
async def create_cat(
    payload: CatRequest,
    context: AuthContext = Depends(get_auth_context),
    catalog: CatCatalog = Depends(get_cat_catalog),
) -> CatSavedResponse:
    cat = await catalog.create_cat(context.user_id, _to_input(payload))
    return CatSavedResponse(
        message="Cat added successfully",
        data=CatSavedData(id=cat.id, created_at=cat.created_at),
    )


@router.put("/{cat_id}", response_model=CatSavedResponse)
async def update_cat(
    cat_id: UUID,
    payload: CatRequest,
    context: AuthContext = Depends(get_auth_context),
    catalog: CatCatalog = Depends(get_cat_catalog),
) -> CatSavedResponse:
    cat = await catalog.update_cat(context.user_id, cat_id, _to_input(payload))
    return CatSavedResponse(
        message="Cat updated successfully",
        data=CatSavedData(id=cat.id, created_at=cat.created_at),
    )


@router.delete("/{cat_id}", response_model=MessageResponse)
async def delete_cat(
    cat_id: UUID,
    context: AuthContext = Depends(get_auth_context),
    catalog: CatCatalog = Depends(get_cat_catalog),
) -> MessageResponse:
    await catalog.delete_cat(context.user_id, cat_id)
    return MessageResponse(message="Cat deleted successfully")
