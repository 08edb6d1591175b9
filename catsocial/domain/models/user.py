from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from catsocial.domain.value_objects.ids import new_id


@dataclass(slots=True)
class User:
    id: UUID
    email: str
    name: str
    hashed_password: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls, email: str, name: str, hashed_password: str) -> User:
        now = datetime.now(timezone.utc)
        return cls(
            id=new_id(),
            email=email.lower(),
            name=name,
            hashed_password=hashed_password,
            created_at=now,
            updated_at=now,
        )
