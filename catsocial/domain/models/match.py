from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from catsocial.domain.models.cat import Cat
from catsocial.domain.models.user import User
from catsocial.domain.value_objects.ids import new_id
from catsocial.domain.value_objects.match_status import MatchStatus

MESSAGE_MIN_LENGTH = 5
MESSAGE_MAX_LENGTH = 120


def pair_key(cat_a: UUID, cat_b: UUID) -> str:
    """Order-independent key for the pair of cats a match links."""
    first, second = sorted((str(cat_a), str(cat_b)))
    return f"{first}:{second}"


@dataclass(slots=True)
class Match:
    id: UUID
    match_cat_id: UUID
    user_cat_id: UUID
    message: str
    approved_at: datetime | None = None
    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    @property
    def is_pending(self) -> bool:
        return self.deleted_at is None and self.approved_at is None

    @property
    def status(self) -> MatchStatus:
        if self.approved_at is not None:
            return MatchStatus.APPROVED
        if self.deleted_at is None:
            return MatchStatus.PENDING
        return MatchStatus.CLOSED

    @property
    def pair_key(self) -> str:
        return pair_key(self.match_cat_id, self.user_cat_id)

    @classmethod
    def create(cls, match_cat_id: UUID, user_cat_id: UUID, message: str) -> Match:
        if not MESSAGE_MIN_LENGTH <= len(message) <= MESSAGE_MAX_LENGTH:
            raise ValueError(
                f"message length must be between {MESSAGE_MIN_LENGTH} and {MESSAGE_MAX_LENGTH}"
            )
        now = datetime.now(timezone.utc)
        return cls(
            id=new_id(),
            match_cat_id=match_cat_id,
            user_cat_id=user_cat_id,
            message=message,
            created_at=now,
            updated_at=now,
        )


@dataclass(slots=True)
class DetailMatch:
    """A match joined with the owners on both sides.

    The store only resolves `issuer_id`/`receiver_id`; the engine fills the
    user and cat records.
    """

    match: Match
    issuer_id: UUID
    receiver_id: UUID
    issuer: User | None = None
    match_cat: Cat | None = None
    user_cat: Cat | None = None

    @property
    def id(self) -> UUID:
        return self.match.id

    @property
    def is_active(self) -> bool:
        return self.match.is_active

    @property
    def is_pending(self) -> bool:
        return self.match.is_pending
