from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from catsocial.application.services.matching_engine import MatchingEngine
from catsocial.domain.models.match import DetailMatch
from catsocial.infrastructure.auth.context import AuthContext
from catsocial.interfaces.http.deps import get_auth_context, get_matching_engine
from catsocial.interfaces.http.schemas.cats import CatResponse
from catsocial.interfaces.http.schemas.common import MessageResponse
from catsocial.interfaces.http.schemas.matches import (
    IssuerResponse,
    MatchAction,
    MatchCreate,
    MatchDetailResponse,
    MatchesListResponse,
    MatchSavedData,
    MatchSavedResponse,
)

router = APIRouter(prefix="/cat/match", tags=["matches"])


def _to_detail_response(detail: DetailMatch) -> MatchDetailResponse:
    return MatchDetailResponse(
        id=detail.id,
        issued_by=IssuerResponse(
            name=detail.issuer.name,
            email=detail.issuer.email,
            created_at=detail.issuer.created_at,
        ),
        match_cat_detail=CatResponse.model_validate(detail.match_cat),
        user_cat_detail=CatResponse.model_validate(detail.user_cat),
        message=detail.match.message,
        status=detail.match.status,
        created_at=detail.match.created_at,
    )


@router.post("", response_model=MatchSavedResponse, status_code=status.HTTP_201_CREATED)
async def create_match(
    payload: MatchCreate,
    context: AuthContext = Depends(get_auth_context),
    engine: MatchingEngine = Depends(get_matching_engine),
) -> MatchSavedResponse:
    match = await engine.new_match(
        match_cat_id=payload.match_cat_id,
        user_cat_id=payload.user_cat_id,
        message=payload.message,
        user_id=context.user_id,
    )
    return MatchSavedResponse(
        message="Match created successfully",
        data=MatchSavedData(id=match.id, created_at=match.created_at),
    )


@router.get("", response_model=MatchesListResponse)
async def list_matches(
    context: AuthContext = Depends(get_auth_context),
    engine: MatchingEngine = Depends(get_matching_engine),
) -> MatchesListResponse:
    details = await engine.list_matches(context.user_id)
    return MatchesListResponse(
        message="Success",
        data=[_to_detail_response(detail) for detail in details],
    )


@router.post("/approve", response_model=MessageResponse)
async def approve_match(
    payload: MatchAction,
    context: AuthContext = Depends(get_auth_context),
    engine: MatchingEngine = Depends(get_matching_engine),
) -> MessageResponse:
    await engine.approve_match(payload.match_id, context.user_id)
    return MessageResponse(message="Match approved successfully")


@router.post("/reject", response_model=MessageResponse)
async def reject_match(
    payload: MatchAction,
    context: AuthContext = Depends(get_auth_context),
    engine: MatchingEngine = Depends(get_matching_engine),
) -> MessageResponse:
    await engine.reject_match(payload.match_id, context.user_id)
    return MessageResponse(message="Match rejected successfully")


@router.delete("/{match_id}", response_model=MessageResponse)
async def withdraw_match(
    match_id: UUID,
    context: AuthContext = Depends(get_auth_context),
    engine: MatchingEngine = Depends(get_matching_engine),
) -> MessageResponse:
    await engine.withdraw_match(match_id, context.user_id)
    return MessageResponse(message="Match deleted successfully")
