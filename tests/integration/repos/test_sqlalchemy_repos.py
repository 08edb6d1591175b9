from __future__ import annotations

import asyncio
from uuid import UUID, uuid4

import pytest

from catsocial.application.errors import CatAlreadyMatched, InfrastructureError
from catsocial.application.services.matching_engine import MatchingEngine
from catsocial.domain.models.match import Match
from catsocial.domain.value_objects.cat_query import CatQuery
from catsocial.infrastructure.db.session import SQLAlchemyUnitOfWork
from catsocial.infrastructure.repos.matches_sqlalchemy import MatchesSQLAlchemyRepository


@pytest.fixture()
async def proposal(client, register, add_cat):
    alice = await register("alice@example.com")
    bob = await register("bob@example.com")
    alice_cat = await add_cat(alice, sex="female")
    bob_cat = await add_cat(bob, sex="male")
    response = await client.post(
        "/v1/cat/match",
        json={"matchCatId": alice_cat, "userCatId": bob_cat, "message": "Hello there!"},
        headers=bob,
    )
    assert response.status_code == 201
    return {
        "match_id": UUID(response.json()["data"]["id"]),
        "alice_cat": UUID(alice_cat),
        "bob_cat": UUID(bob_cat),
        "alice": alice,
    }


async def _user_id(app, email: str) -> UUID:
    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        user = await uow.users.get_by_email(email)
    return user.id


async def test_failed_cascade_rolls_back_cat_flags(app, proposal, monkeypatch):
    alice_id = await _user_id(app, "alice@example.com")

    async def broken(self, user_id, keep_match_id):
        raise RuntimeError("cascade failed")

    monkeypatch.setattr(MatchesSQLAlchemyRepository, "delete_all_except", broken)

    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        engine = MatchingEngine(uow)
        with pytest.raises(InfrastructureError):
            await engine.approve_match(proposal["match_id"], alice_id)

    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        for cat_id in (proposal["alice_cat"], proposal["bob_cat"]):
            cat = await uow.cats.get(cat_id)
            assert cat.has_matched is False
        detail = await uow.matches.get(proposal["match_id"])
        assert detail.is_pending


async def test_set_matched_is_conditional(app, proposal):
    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        assert await uow.cats.set_matched(proposal["alice_cat"]) is True
        assert await uow.cats.set_matched(proposal["alice_cat"]) is False
        await uow.commit()

    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        cat = await uow.cats.get(proposal["alice_cat"])
        assert cat.has_matched is True


async def test_active_pair_is_unique_in_both_directions(app, proposal):
    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        mirrored = Match.create(
            match_cat_id=proposal["bob_cat"],
            user_cat_id=proposal["alice_cat"],
            message="Mirror image",
        )
        with pytest.raises(CatAlreadyMatched):
            await uow.matches.add(mirrored)
        await uow.rollback()


async def test_detail_resolves_owners(app, proposal):
    alice_id = await _user_id(app, "alice@example.com")
    bob_id = await _user_id(app, "bob@example.com")

    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        detail = await uow.matches.get(proposal["match_id"], for_update=True)
        assert detail.receiver_id == alice_id
        assert detail.issuer_id == bob_id
        assert [d.id for d in await uow.matches.list_detailed(alice_id)] == [detail.id]
        assert await uow.matches.exists_active_for_cat(proposal["bob_cat"])


async def test_cascade_closes_every_other_active_match(app, client, register, add_cat, proposal):
    carol = await register("carol@example.com")
    carol_cat = await add_cat(carol, sex="male")
    alice_second = await add_cat(proposal["alice"], sex="female", name="Bella")
    response = await client.post(
        "/v1/cat/match",
        json={
            "matchCatId": str(proposal["alice_cat"]),
            "userCatId": carol_cat,
            "message": "Hi Luna!",
        },
        headers=carol,
    )
    assert response.status_code == 201
    alice_id = await _user_id(app, "alice@example.com")

    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        assert await uow.matches.approve(proposal["match_id"]) is True
        closed = await uow.matches.delete_all_except(alice_id, proposal["match_id"])
        await uow.commit()
    assert closed == 1

    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        later = await uow.matches.add(
            Match.create(
                match_cat_id=UUID(alice_second),
                user_cat_id=UUID(carol_cat),
                message="Second chance",
            )
        )
        assert await uow.matches.approve(later.id) is True
        closed = await uow.matches.delete_all_except(alice_id, later.id)
        await uow.commit()
    assert closed == 1

    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        earlier = await uow.matches.get(proposal["match_id"])
        assert not earlier.is_active
        assert [d.id for d in await uow.matches.list_detailed(alice_id)] == [later.id]


async def test_concurrent_approvals_on_a_shared_cat(
    app, client, register, add_cat, proposal, monkeypatch
):
    carol = await register("carol@example.com")
    carol_cat = UUID(await add_cat(carol, sex="male"))
    response = await client.post(
        "/v1/cat/match",
        json={
            "matchCatId": str(proposal["alice_cat"]),
            "userCatId": str(carol_cat),
            "message": "Hi Luna!",
        },
        headers=carol,
    )
    assert response.status_code == 201
    carol_match = UUID(response.json()["data"]["id"])
    alice_id = await _user_id(app, "alice@example.com")

    # hold both approvals until each has passed its read phase
    barrier = asyncio.Barrier(2)
    original_get = MatchesSQLAlchemyRepository.get

    async def get_after_barrier(self, match_id, *, for_update=False):
        if for_update:
            await barrier.wait()
        return await original_get(self, match_id, for_update=for_update)

    monkeypatch.setattr(MatchesSQLAlchemyRepository, "get", get_after_barrier)

    async def approve(match_id: UUID) -> str:
        async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
            try:
                await MatchingEngine(uow).approve_match(match_id, alice_id)
            except CatAlreadyMatched as exc:
                return type(exc).__name__
        return "ok"

    results = await asyncio.gather(approve(proposal["match_id"]), approve(carol_match))
    assert sorted(results) == ["CatAlreadyMatched", "ok"]

    bob_side = (proposal["match_id"], proposal["bob_cat"])
    carol_side = (carol_match, carol_cat)
    winner, loser = (bob_side, carol_side) if results[0] == "ok" else (carol_side, bob_side)
    monkeypatch.undo()
    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        assert (await uow.cats.get(proposal["alice_cat"])).has_matched is True
        assert (await uow.cats.get(winner[1])).has_matched is True
        assert (await uow.cats.get(loser[1])).has_matched is False
        assert (await uow.matches.get(winner[0])).is_active
        assert not (await uow.matches.get(loser[0])).is_active


async def test_query_skips_deleted_cats(app, proposal):
    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        assert await uow.cats.delete(proposal["bob_cat"]) is True
        assert await uow.cats.delete(proposal["bob_cat"]) is False
        await uow.commit()

    async with SQLAlchemyUnitOfWork(app.state.session_factory) as uow:
        found = await uow.cats.query(uuid4(), CatQuery.by_id(proposal["bob_cat"]))
        assert found == []
        kept = await uow.cats.get(proposal["bob_cat"], include_images=True, include_deleted=True)
        assert kept.is_deleted
        assert kept.image_urls == ["https://img.test/mochi.png"]
