from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catsocial.application.errors import InfrastructureError
from catsocial.application.interfaces.repositories.cats import CatRepository
from catsocial.domain.models.cat import Cat
from catsocial.domain.value_objects.cat_query import CatQuery
from catsocial.domain.value_objects.ids import new_id
from catsocial.infrastructure.db.orm.cat import CatImageORM, CatORM


class CatsSQLAlchemyRepository(CatRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: CatORM) -> Cat:
        return Cat(
            id=orm.id,
            user_id=orm.user_id,
            name=orm.name,
            race=orm.race,
            sex=orm.sex,
            age_in_month=orm.age_in_month,
            description=orm.description,
            has_matched=orm.has_matched,
            deleted_at=orm.deleted_at,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    def _image_rows(self, cat: Cat) -> list[CatImageORM]:
        return [
            CatImageORM(id=new_id(), cat_id=cat.id, image_url=url, position=position)
            for position, url in enumerate(cat.image_urls)
        ]

    async def add(self, cat: Cat) -> Cat:
        orm = CatORM(
            id=cat.id,
            user_id=cat.user_id,
            name=cat.name,
            race=cat.race,
            sex=cat.sex,
            age_in_month=cat.age_in_month,
            description=cat.description,
            has_matched=cat.has_matched,
            deleted_at=cat.deleted_at,
            created_at=cat.created_at,
            updated_at=cat.updated_at,
        )
        self.session.add(orm)
        try:
            await self.session.flush()
            self.session.add_all(self._image_rows(cat))
            await self.session.flush()
        except IntegrityError as exc:
            raise InfrastructureError("Failed to store cat") from exc
        created = self._to_domain(orm)
        created.image_urls = list(cat.image_urls)
        return created

    async def query(
        self,
        owner_id: UUID,
        query: CatQuery,
        *,
        include_images: bool = False,
    ) -> list[Cat]:
        stmt = select(CatORM).where(CatORM.deleted_at.is_(None))
        if query.id is not None:
            stmt = stmt.where(CatORM.id == query.id)
        if query.race is not None:
            stmt = stmt.where(CatORM.race == query.race)
        if query.sex is not None:
            stmt = stmt.where(CatORM.sex == query.sex)
        if query.has_matched is not None:
            stmt = stmt.where(CatORM.has_matched.is_(query.has_matched))
        if query.age is not None:
            column = CatORM.age_in_month
            if query.age.op == ">":
                stmt = stmt.where(column > query.age.months)
            elif query.age.op == "<":
                stmt = stmt.where(column < query.age.months)
            else:
                stmt = stmt.where(column == query.age.months)
        if query.owned is True:
            stmt = stmt.where(CatORM.user_id == owner_id)
        elif query.owned is False:
            stmt = stmt.where(CatORM.user_id != owner_id)
        if query.search:
            stmt = stmt.where(CatORM.name.icontains(query.search, autoescape=True))

        stmt = stmt.order_by(CatORM.created_at.desc(), CatORM.id.desc())
        if query.limit:
            stmt = stmt.limit(query.limit)
        if query.offset:
            stmt = stmt.offset(query.offset)

        result = await self.session.execute(stmt)
        cats = [self._to_domain(row) for row in result.scalars().all()]
        if include_images:
            await self._load_images(cats)
        return cats

    async def get(
        self,
        cat_id: UUID,
        *,
        include_images: bool = False,
        include_deleted: bool = False,
    ) -> Cat | None:
        stmt = select(CatORM).where(CatORM.id == cat_id)
        if not include_deleted:
            stmt = stmt.where(CatORM.deleted_at.is_(None))
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        if not orm:
            return None
        cat = self._to_domain(orm)
        if include_images:
            await self._load_images([cat])
        return cat

    async def _load_images(self, cats: list[Cat]) -> None:
        """Fill `image_urls` for all cats with a single round trip."""
        if not cats:
            return
        stmt = (
            select(CatImageORM.cat_id, CatImageORM.image_url)
            .where(CatImageORM.cat_id.in_([cat.id for cat in cats]))
            .order_by(CatImageORM.cat_id, CatImageORM.position)
        )
        result = await self.session.execute(stmt)
        urls_by_cat: dict[UUID, list[str]] = defaultdict(list)
        for cat_id, image_url in result.all():
            urls_by_cat[cat_id].append(image_url)
        for cat in cats:
            cat.image_urls = urls_by_cat.get(cat.id, [])

    async def update(self, cat: Cat) -> Cat | None:
        # has_matched is only ever written through set_matched
        stmt = (
            update(CatORM)
            .where(CatORM.id == cat.id, CatORM.deleted_at.is_(None))
            .values(
                name=cat.name,
                race=cat.race,
                sex=cat.sex,
                age_in_month=cat.age_in_month,
                description=cat.description,
                updated_at=cat.updated_at,
            )
            .returning(CatORM.id)
        )
        try:
            result = await self.session.execute(stmt)
            if result.scalar_one_or_none() is None:
                return None
            if cat.image_urls:
                await self.session.execute(
                    delete(CatImageORM).where(CatImageORM.cat_id == cat.id)
                )
                self.session.add_all(self._image_rows(cat))
                await self.session.flush()
        except IntegrityError as exc:
            raise InfrastructureError("Failed to update cat") from exc
        return cat

    async def set_matched(self, cat_id: UUID) -> bool:
        stmt = (
            update(CatORM)
            .where(
                CatORM.id == cat_id,
                CatORM.has_matched.is_(False),
                CatORM.deleted_at.is_(None),
            )
            .values(has_matched=True, updated_at=datetime.now(timezone.utc))
            .returning(CatORM.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def delete(self, cat_id: UUID) -> bool:
        stmt = (
            update(CatORM)
            .where(CatORM.id == cat_id, CatORM.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc))
            .returning(CatORM.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None
