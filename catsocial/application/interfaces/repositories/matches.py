from __future__ import annotations

from typing import Protocol
from uuid import UUID

from catsocial.domain.models.match import DetailMatch, Match


class MatchRepository(Protocol):
    async def add(self, match: Match) -> Match: ...

    async def exists_active_between(self, cat_a: UUID, cat_b: UUID) -> bool: ...

    async def exists_active_for_cat(self, cat_id: UUID) -> bool: ...

    async def list_detailed(self, user_id: UUID) -> list[DetailMatch]: ...

    async def get(self, match_id: UUID, *, for_update: bool = False) -> DetailMatch | None: ...

    async def approve(self, match_id: UUID) -> bool: ...

    async def delete_all_except(self, user_id: UUID, keep_match_id: UUID) -> int: ...

    async def delete_pending_for_cat(self, cat_id: UUID) -> int: ...

    async def delete(self, match_id: UUID) -> bool: ...
