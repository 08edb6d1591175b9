from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from catsocial.application.errors import AuthError
from catsocial.application.interfaces.repositories.users import UserRepository
from catsocial.domain.models.user import User


@dataclass(slots=True)
class AuthContext:
    user_id: UUID
    email: str
    name: str
    claims: dict[str, Any]


async def fetch_user(users: UserRepository, user_id: UUID) -> User:
    """Resolve the token subject; a deleted or unknown user is not authenticated."""
    user = await users.get(user_id)
    if not user:
        raise AuthError("User not found for token")
    return user
