from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import and_, exists, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from catsocial.application.errors import CatAlreadyMatched
from catsocial.application.interfaces.repositories.matches import MatchRepository
from catsocial.domain.models.match import DetailMatch, Match
from catsocial.infrastructure.db.orm.cat import CatORM
from catsocial.infrastructure.db.orm.match import MatchORM


class MatchesSQLAlchemyRepository(MatchRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: MatchORM) -> Match:
        return Match(
            id=orm.id,
            match_cat_id=orm.match_cat_id,
            user_cat_id=orm.user_cat_id,
            message=orm.message,
            approved_at=orm.approved_at,
            deleted_at=orm.deleted_at,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    def _detailed_select(self):
        # receiver owns the match cat, issuer owns the user cat
        receiver_cat = aliased(CatORM)
        issuer_cat = aliased(CatORM)
        stmt = (
            select(MatchORM, receiver_cat.user_id, issuer_cat.user_id)
            .join(receiver_cat, MatchORM.match_cat_id == receiver_cat.id)
            .join(issuer_cat, MatchORM.user_cat_id == issuer_cat.id)
        )
        return stmt, receiver_cat, issuer_cat

    def _pending(self):
        return and_(MatchORM.deleted_at.is_(None), MatchORM.approved_at.is_(None))

    async def add(self, match: Match) -> Match:
        orm = MatchORM(
            id=match.id,
            match_cat_id=match.match_cat_id,
            user_cat_id=match.user_cat_id,
            message=match.message,
            pair_key=match.pair_key,
            approved_at=match.approved_at,
            deleted_at=match.deleted_at,
            created_at=match.created_at,
            updated_at=match.updated_at,
        )
        self.session.add(orm)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # ux_matches_active_pair: another active match links the same cats
            raise CatAlreadyMatched() from exc
        return self._to_domain(orm)

    async def exists_active_between(self, cat_a: UUID, cat_b: UUID) -> bool:
        stmt = select(
            exists().where(
                MatchORM.deleted_at.is_(None),
                or_(
                    and_(MatchORM.match_cat_id == cat_a, MatchORM.user_cat_id == cat_b),
                    and_(MatchORM.match_cat_id == cat_b, MatchORM.user_cat_id == cat_a),
                ),
            )
        )
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def exists_active_for_cat(self, cat_id: UUID) -> bool:
        stmt = select(
            exists().where(
                MatchORM.deleted_at.is_(None),
                or_(MatchORM.match_cat_id == cat_id, MatchORM.user_cat_id == cat_id),
            )
        )
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def list_detailed(self, user_id: UUID) -> list[DetailMatch]:
        stmt, receiver_cat, issuer_cat = self._detailed_select()
        stmt = stmt.where(
            MatchORM.deleted_at.is_(None),
            or_(receiver_cat.user_id == user_id, issuer_cat.user_id == user_id),
        ).order_by(MatchORM.created_at.desc(), MatchORM.id.desc())
        result = await self.session.execute(stmt)
        return [
            DetailMatch(
                match=self._to_domain(orm),
                issuer_id=issuer_id,
                receiver_id=receiver_id,
            )
            for orm, receiver_id, issuer_id in result.all()
        ]

    async def get(self, match_id: UUID, *, for_update: bool = False) -> DetailMatch | None:
        stmt, _, _ = self._detailed_select()
        stmt = stmt.where(MatchORM.id == match_id)
        if for_update:
            # refresh rows already held by the session with the locked values
            stmt = stmt.with_for_update(of=MatchORM).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        orm, receiver_id, issuer_id = row
        return DetailMatch(
            match=self._to_domain(orm),
            issuer_id=issuer_id,
            receiver_id=receiver_id,
        )

    async def approve(self, match_id: UUID) -> bool:
        stmt = (
            update(MatchORM)
            .where(MatchORM.id == match_id, self._pending())
            .values(approved_at=datetime.now(timezone.utc))
            .returning(MatchORM.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def delete_all_except(self, user_id: UUID, keep_match_id: UUID) -> int:
        owned_cats = select(CatORM.id).where(CatORM.user_id == user_id)
        stmt = (
            update(MatchORM)
            .where(
                MatchORM.id != keep_match_id,
                MatchORM.deleted_at.is_(None),
                or_(
                    MatchORM.match_cat_id.in_(owned_cats),
                    MatchORM.user_cat_id.in_(owned_cats),
                ),
            )
            .values(deleted_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def delete_pending_for_cat(self, cat_id: UUID) -> int:
        stmt = (
            update(MatchORM)
            .where(
                self._pending(),
                or_(MatchORM.match_cat_id == cat_id, MatchORM.user_cat_id == cat_id),
            )
            .values(deleted_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def delete(self, match_id: UUID) -> bool:
        stmt = (
            update(MatchORM)
            .where(MatchORM.id == match_id, self._pending())
            .values(deleted_at=datetime.now(timezone.utc))
            .returning(MatchORM.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None
