from __future__ import annotations

import copy
from dataclasses import replace
from datetime import datetime, timezone
from uuid import UUID

import pytest

from catsocial.application.errors import CatAlreadyMatched
from catsocial.domain.models.cat import Cat
from catsocial.domain.models.match import DetailMatch, Match
from catsocial.domain.models.user import User
from catsocial.domain.value_objects.cat_query import CatQuery


class StubUsers:
    def __init__(self) -> None:
        self.rows: dict[UUID, User] = {}

    async def add(self, user: User) -> User:
        self.rows[user.id] = user
        return user

    async def get(self, user_id):
        return self.rows.get(user_id)

    async def get_by_email(self, email):
        return next((u for u in self.rows.values() if u.email == email.lower()), None)


class StubCats:
    def __init__(self) -> None:
        self.rows: dict[UUID, Cat] = {}

    async def add(self, cat: Cat) -> Cat:
        self.rows[cat.id] = replace(cat, image_urls=list(cat.image_urls))
        return cat

    async def query(self, owner_id, query: CatQuery, *, include_images=False):
        found = []
        for cat in self.rows.values():
            if cat.deleted_at is not None:
                continue
            if query.id is not None and cat.id != query.id:
                continue
            if query.race is not None and cat.race != query.race:
                continue
            if query.sex is not None and cat.sex != query.sex:
                continue
            if query.has_matched is not None and cat.has_matched != query.has_matched:
                continue
            if query.age is not None:
                age, months = cat.age_in_month, query.age.months
                if query.age.op == ">" and not age > months:
                    continue
                if query.age.op == "<" and not age < months:
                    continue
                if query.age.op == "=" and age != months:
                    continue
            if query.owned is True and cat.user_id != owner_id:
                continue
            if query.owned is False and cat.user_id == owner_id:
                continue
            if query.search and query.search.lower() not in cat.name.lower():
                continue
            found.append(cat)
        found.sort(key=lambda c: (c.created_at, c.id), reverse=True)
        page = found[query.offset : query.offset + query.limit]
        return [
            replace(c, image_urls=list(c.image_urls) if include_images else []) for c in page
        ]

    async def get(self, cat_id, *, include_images=False, include_deleted=False):
        cat = self.rows.get(cat_id)
        if cat is None or (cat.deleted_at is not None and not include_deleted):
            return None
        return replace(cat, image_urls=list(cat.image_urls) if include_images else [])

    async def update(self, cat: Cat):
        stored = self.rows.get(cat.id)
        if stored is None or stored.deleted_at is not None:
            return None
        self.rows[cat.id] = replace(
            cat, has_matched=stored.has_matched, image_urls=list(cat.image_urls)
        )
        return cat

    async def set_matched(self, cat_id) -> bool:
        cat = self.rows.get(cat_id)
        if cat is None or cat.deleted_at is not None or cat.has_matched:
            return False
        cat.has_matched = True
        return True

    async def delete(self, cat_id) -> bool:
        cat = self.rows.get(cat_id)
        if cat is None or cat.deleted_at is not None:
            return False
        cat.deleted_at = datetime.now(timezone.utc)
        return True


class StubMatches:
    def __init__(self, cats: StubCats) -> None:
        self.cats = cats
        self.rows: dict[UUID, Match] = {}

    def _owner(self, cat_id):
        return self.cats.rows[cat_id].user_id

    def _detail(self, match: Match) -> DetailMatch:
        return DetailMatch(
            match=replace(match),
            issuer_id=self._owner(match.user_cat_id),
            receiver_id=self._owner(match.match_cat_id),
        )

    def _touches_owner(self, match: Match, user_id) -> bool:
        return user_id in (self._owner(match.match_cat_id), self._owner(match.user_cat_id))

    async def add(self, match: Match) -> Match:
        if any(m.is_active and m.pair_key == match.pair_key for m in self.rows.values()):
            raise CatAlreadyMatched()
        self.rows[match.id] = replace(match)
        return match

    async def exists_active_between(self, cat_a, cat_b) -> bool:
        return any(
            m.is_active and {m.match_cat_id, m.user_cat_id} == {cat_a, cat_b}
            for m in self.rows.values()
        )

    async def exists_active_for_cat(self, cat_id) -> bool:
        return any(
            m.is_active and cat_id in (m.match_cat_id, m.user_cat_id) for m in self.rows.values()
        )

    async def list_detailed(self, user_id):
        active = [
            m for m in self.rows.values() if m.is_active and self._touches_owner(m, user_id)
        ]
        active.sort(key=lambda m: (m.created_at, m.id), reverse=True)
        return [self._detail(m) for m in active]

    async def get(self, match_id, *, for_update=False):
        match = self.rows.get(match_id)
        return self._detail(match) if match else None

    async def approve(self, match_id) -> bool:
        match = self.rows.get(match_id)
        if match is None or not match.is_pending:
            return False
        match.approved_at = datetime.now(timezone.utc)
        return True

    async def delete_all_except(self, user_id, keep_match_id) -> int:
        closed = 0
        for match in self.rows.values():
            if match.id == keep_match_id or not match.is_active:
                continue
            if self._touches_owner(match, user_id):
                match.deleted_at = datetime.now(timezone.utc)
                closed += 1
        return closed

    async def delete_pending_for_cat(self, cat_id) -> int:
        closed = 0
        for match in self.rows.values():
            if match.is_pending and cat_id in (match.match_cat_id, match.user_cat_id):
                match.deleted_at = datetime.now(timezone.utc)
                closed += 1
        return closed

    async def delete(self, match_id) -> bool:
        match = self.rows.get(match_id)
        if match is None or not match.is_pending:
            return False
        match.deleted_at = datetime.now(timezone.utc)
        return True


class StubUnitOfWork:
    """In-memory unit of work; rollback restores the state of the last commit."""

    def __init__(self) -> None:
        self.users = StubUsers()
        self.cats = StubCats()
        self.matches = StubMatches(self.cats)
        self.commits = 0
        self.rollbacks = 0
        self._snapshot = self._take_snapshot()

    def _take_snapshot(self):
        return copy.deepcopy((self.users.rows, self.cats.rows, self.matches.rows))

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot = self._take_snapshot()

    async def rollback(self) -> None:
        self.rollbacks += 1
        users, cats, matches = copy.deepcopy(self._snapshot)
        self.users.rows = users
        self.cats.rows = cats
        self.matches.rows = matches


@pytest.fixture()
def uow() -> StubUnitOfWork:
    return StubUnitOfWork()


@pytest.fixture()
def seed(uow: StubUnitOfWork):
    """Insert users and cats directly into the stub stores."""

    class Seeder:
        def user(self, name: str = "Owner Name") -> User:
            user = User.create(
                email=f"{name.replace(' ', '.').lower()}@cats.test",
                name=name,
                hashed_password="x",
            )
            uow.users.rows[user.id] = user
            uow._snapshot = uow._take_snapshot()
            return user

        def cat(self, owner: User, *, sex: str = "female", **fields) -> Cat:
            values = {
                "name": "Mochi",
                "race": "Persian",
                "age_in_month": 12,
                "description": "Calm indoor cat",
                "image_urls": ["https://img.test/cat.png"],
            }
            values.update(fields)
            cat = Cat.create(user_id=owner.id, sex=sex, **values)
            uow.cats.rows[cat.id] = cat
            uow._snapshot = uow._take_snapshot()
            return cat

    return Seeder()
