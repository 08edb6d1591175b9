from __future__ import annotations

from dataclasses import dataclass

from catsocial.application.errors import InvalidPassword, UserNotFound
from catsocial.application.interfaces.unit_of_work import UnitOfWork
from catsocial.application.use_cases.auth.register_user import AuthResult
from catsocial.infrastructure.auth.jwt_service import JWTService
from catsocial.infrastructure.auth.password import PasswordHasher


@dataclass(slots=True)
class LoginInput:
    email: str
    password: str


async def execute(
    *,
    uow: UnitOfWork,
    payload: LoginInput,
    password_hasher: PasswordHasher,
    jwt_service: JWTService,
) -> AuthResult:
    user = await uow.users.get_by_email(payload.email.lower())
    if not user:
        raise UserNotFound("User not found")
    if not password_hasher.verify(payload.password, user.hashed_password):
        raise InvalidPassword()
    token = jwt_service.create_access_token(
        subject=user.id,
        extra_claims={"email": user.email, "name": user.name},
    )
    return AuthResult(user=user, access_token=token)
