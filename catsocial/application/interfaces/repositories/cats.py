from __future__ import annotations

from typing import Protocol
from uuid import UUID

from catsocial.domain.models.cat import Cat
from catsocial.domain.value_objects.cat_query import CatQuery


class CatRepository(Protocol):
    async def add(self, cat: Cat) -> Cat: ...

    async def query(
        self,
        owner_id: UUID,
        query: CatQuery,
        *,
        include_images: bool = False,
    ) -> list[Cat]: ...

    async def get(
        self,
        cat_id: UUID,
        *,
        include_images: bool = False,
        include_deleted: bool = False,
    ) -> Cat | None: ...

    async def update(self, cat: Cat) -> Cat | None: ...

    async def set_matched(self, cat_id: UUID) -> bool: ...

    async def delete(self, cat_id: UUID) -> bool: ...
