from __future__ import annotations

from typing import Protocol

from catsocial.application.interfaces.repositories.cats import CatRepository
from catsocial.application.interfaces.repositories.matches import MatchRepository
from catsocial.application.interfaces.repositories.users import UserRepository


class UnitOfWork(Protocol):
    users: UserRepository
    cats: CatRepository
    matches: MatchRepository

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
