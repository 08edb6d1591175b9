from __future__ import annotations

from dataclasses import dataclass

from catsocial.application.errors import ConflictError
from catsocial.application.interfaces.unit_of_work import UnitOfWork
from catsocial.domain.models.user import User
from catsocial.infrastructure.auth.jwt_service import JWTService
from catsocial.infrastructure.auth.password import PasswordHasher


@dataclass(slots=True)
class RegisterUserInput:
    email: str
    name: str
    password: str


@dataclass(slots=True)
class AuthResult:
    user: User
    access_token: str


async def execute(
    *,
    uow: UnitOfWork,
    payload: RegisterUserInput,
    password_hasher: PasswordHasher,
    jwt_service: JWTService,
) -> AuthResult:
    existing = await uow.users.get_by_email(payload.email)
    if existing:
        raise ConflictError("Email already exists")
    hashed = password_hasher.hash(payload.password)
    user = User.create(email=payload.email, name=payload.name, hashed_password=hashed)
    created = await uow.users.add(user)
    await uow.commit()
    token = jwt_service.create_access_token(
        subject=created.id,
        extra_claims={"email": created.email, "name": created.name},
    )
    return AuthResult(user=created, access_token=token)
