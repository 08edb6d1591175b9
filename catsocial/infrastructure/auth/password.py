from __future__ import annotations

from passlib.context import CryptContext


class PasswordHasher:
    def __init__(
        self,
        schemes: tuple[str, ...] = ("bcrypt",),
        *,
        bcrypt_rounds: int | None = None,
    ) -> None:
        options = {}
        if bcrypt_rounds and "bcrypt" in schemes:
            options["bcrypt__rounds"] = bcrypt_rounds
        self._pwd_context = CryptContext(schemes=schemes, deprecated="auto", **options)

    def hash(self, password: str) -> str:
        return self._pwd_context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return self._pwd_context.verify(plain_password, hashed_password)
