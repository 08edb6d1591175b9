from __future__ import annotations

import logging
from dataclasses import dataclass, field
from uuid import UUID

from catsocial.application.errors import CatAlreadyMatched, CatNotFound, ValidationError
from catsocial.application.interfaces.unit_of_work import UnitOfWork
from catsocial.application.services.operation import guarded_operation
from catsocial.domain.models.cat import Cat
from catsocial.domain.value_objects.cat_query import CatQuery
from catsocial.domain.value_objects.cat_sex import CatSex

module_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CatInput:
    name: str
    race: str
    sex: str
    age_in_month: int
    description: str
    image_urls: list[str] = field(default_factory=list)


class CatCatalog:
    """Cat CRUD for the owners, plus the lookups the matching engine relies on.

    Public CRUD methods own their transaction and commit. The engine-facing
    helpers (`get_candidate`, `get_cat`, `get_detail`, `mark_matched`) never
    commit so they can take part in a caller's unit of work.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        timeout_seconds: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.uow = uow
        self.timeout_seconds = timeout_seconds
        self.logger = logger or module_logger

    def _guard(self, operation: str):
        return guarded_operation(
            self.uow,
            operation=operation,
            timeout_seconds=self.timeout_seconds,
            logger=self.logger,
        )

    async def create_cat(self, owner_id: UUID, payload: CatInput) -> Cat:
        async with self._guard("create_cat"):
            try:
                cat = Cat.create(
                    user_id=owner_id,
                    name=payload.name,
                    race=payload.race,
                    sex=payload.sex,
                    age_in_month=payload.age_in_month,
                    description=payload.description,
                    image_urls=payload.image_urls,
                )
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            created = await self.uow.cats.add(cat)
            await self.uow.commit()
        self.logger.info("Cat created: id=%s owner=%s", created.id, owner_id)
        return created

    async def list_cats(self, owner_id: UUID, query: CatQuery) -> list[Cat]:
        async with self._guard("list_cats"):
            return await self.uow.cats.query(owner_id, query, include_images=True)

    async def update_cat(self, owner_id: UUID, cat_id: UUID, payload: CatInput) -> Cat:
        async with self._guard("update_cat"):
            cat = await self.get_candidate(owner_id, cat_id, owned=True)
            try:
                new_sex = CatSex.parse(payload.sex)
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            if new_sex != cat.sex and await self.uow.matches.exists_active_for_cat(cat.id):
                self.logger.info("Sex change refused for cat %s with active matches", cat.id)
                raise CatAlreadyMatched("cat already requested to match")
            try:
                cat.apply_changes(
                    name=payload.name,
                    race=payload.race,
                    sex=new_sex,
                    age_in_month=payload.age_in_month,
                    description=payload.description,
                    image_urls=payload.image_urls,
                )
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            updated = await self.uow.cats.update(cat)
            if updated is None:
                raise CatNotFound()
            await self.uow.commit()
        self.logger.info("Cat updated: id=%s owner=%s", updated.id, owner_id)
        return updated

    async def delete_cat(self, owner_id: UUID, cat_id: UUID) -> None:
        async with self._guard("delete_cat"):
            cat = await self.get_candidate(owner_id, cat_id, owned=True)
            await self.uow.cats.delete(cat.id)
            closed = await self.uow.matches.delete_pending_for_cat(cat.id)
            await self.uow.commit()
        self.logger.info(
            "Cat deleted: id=%s owner=%s pending_matches_closed=%d", cat_id, owner_id, closed
        )

    async def get_candidate(self, owner_id: UUID, cat_id: UUID, *, owned: bool | None) -> Cat:
        """Fetch a live cat visible to `owner_id`, or raise `CatNotFound`.

        `owned=True` requires the caller to own it, `owned=False` requires
        someone else to, `None` ignores ownership.
        """
        cats = await self.uow.cats.query(owner_id, CatQuery.by_id(cat_id, owned=owned))
        if len(cats) != 1:
            raise CatNotFound()
        return cats[0]

    async def get_cat(self, cat_id: UUID) -> Cat:
        cat = await self.uow.cats.get(cat_id)
        if cat is None:
            raise CatNotFound()
        return cat

    async def get_detail(self, cat_id: UUID) -> Cat:
        # Soft-deleted cats still describe the matches they took part in
        cat = await self.uow.cats.get(cat_id, include_images=True, include_deleted=True)
        if cat is None:
            raise CatNotFound(details={"cat_id": str(cat_id)})
        return cat

    async def mark_matched(self, cat_id: UUID) -> bool:
        return await self.uow.cats.set_matched(cat_id)
