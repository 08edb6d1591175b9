from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from catsocial.application.use_cases.auth import login_user, register_user
from catsocial.infrastructure.auth.jwt_service import JWTService
from catsocial.infrastructure.auth.password import PasswordHasher
from catsocial.interfaces.http.deps import get_jwt_service, get_password_hasher, get_uow
from catsocial.interfaces.http.schemas.auth import (
    AuthData,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
)

router = APIRouter(prefix="/user", tags=["auth"])
logger = logging.getLogger(__name__)


def _auth_response(message: str, result: register_user.AuthResult) -> AuthResponse:
    return AuthResponse(
        message=message,
        data=AuthData(
            email=result.user.email,
            name=result.user.name,
            access_token=result.access_token,
        ),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    uow=Depends(get_uow),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    jwt_service: JWTService = Depends(get_jwt_service),
) -> AuthResponse:
    result = await register_user.execute(
        uow=uow,
        payload=register_user.RegisterUserInput(
            email=payload.email,
            name=payload.name,
            password=payload.password,
        ),
        password_hasher=password_hasher,
        jwt_service=jwt_service,
    )
    logger.info("User registered: id=%s", result.user.id)
    return _auth_response("User registered successfully", result)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    uow=Depends(get_uow),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    jwt_service: JWTService = Depends(get_jwt_service),
) -> AuthResponse:
    result = await login_user.execute(
        uow=uow,
        payload=login_user.LoginInput(email=payload.email, password=payload.password),
        password_hasher=password_hasher,
        jwt_service=jwt_service,
    )
    return _auth_response("User logged in successfully", result)
