from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request

from catsocial.application.errors import AuthError
from catsocial.application.services.cat_catalog import CatCatalog
from catsocial.application.services.matching_engine import MatchingEngine
from catsocial.config.settings import Settings, get_settings
from catsocial.infrastructure.auth.context import AuthContext
from catsocial.infrastructure.auth.jwt_service import JWTService
from catsocial.infrastructure.auth.password import PasswordHasher
from catsocial.infrastructure.db.session import SQLAlchemyUnitOfWork


async def get_auth_context(request: Request) -> AuthContext:
    context = getattr(request.state, "auth_context", None)
    if context is None:
        raise AuthError("Authentication required")
    return context


async def get_uow(request: Request) -> AsyncIterator[SQLAlchemyUnitOfWork]:
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Session factory not configured")
    uow = SQLAlchemyUnitOfWork(session_factory)
    async with uow:
        yield uow


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_password_hasher(request: Request) -> PasswordHasher:
    hasher = getattr(request.app.state, "password_hasher", None)
    if hasher is None:
        raise RuntimeError("Password hasher not configured")
    return hasher


def get_jwt_service(request: Request) -> JWTService:
    service = getattr(request.app.state, "jwt_service", None)
    if service is None:
        raise RuntimeError("JWT service not configured")
    return service


def get_cat_catalog(
    uow=Depends(get_uow),
    settings: Settings = Depends(get_app_settings),
) -> CatCatalog:
    return CatCatalog(uow, timeout_seconds=settings.request_timeout_seconds)


def get_matching_engine(
    uow=Depends(get_uow),
    catalog: CatCatalog = Depends(get_cat_catalog),
    settings: Settings = Depends(get_app_settings),
) -> MatchingEngine:
    return MatchingEngine(
        uow, catalog=catalog, timeout_seconds=settings.request_timeout_seconds
    )
