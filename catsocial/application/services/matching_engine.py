from __future__ import annotations

import logging
from uuid import UUID

from catsocial.application.errors import (
    CatAlreadyMatched,
    CatGenderNotMatch,
    CatNotFound,
    CatSameOwner,
    InfrastructureError,
    MatchNotFound,
    MatchNotValid,
    UserNotFound,
    ValidationError,
)
from catsocial.application.interfaces.unit_of_work import UnitOfWork
from catsocial.application.services.cat_catalog import CatCatalog
from catsocial.application.services.operation import guarded_operation
from catsocial.domain.models.match import DetailMatch, Match

module_logger = logging.getLogger(__name__)


class MatchingEngine:
    """Match lifecycle rules across the cat and match stores.

    A match is created pending and is resolved exactly once: approved by the
    receiver, rejected by the receiver, or withdrawn by the issuer. Approval is
    the only transition that touches cats; it flags both cats and closes every
    other active match of both owners in the same transaction.

    The engine keeps no state between calls. All consistency is delegated to
    the unit of work it is given.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        catalog: CatCatalog | None = None,
        timeout_seconds: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.uow = uow
        self.logger = logger or module_logger
        self.timeout_seconds = timeout_seconds
        self.catalog = catalog or CatCatalog(
            uow, timeout_seconds=timeout_seconds, logger=self.logger
        )

    def _guard(self, operation: str):
        return guarded_operation(
            self.uow,
            operation=operation,
            timeout_seconds=self.timeout_seconds,
            logger=self.logger,
        )

    async def new_match(
        self,
        match_cat_id: UUID,
        user_cat_id: UUID,
        message: str,
        user_id: UUID,
    ) -> Match:
        async with self._guard("new_match"):
            # Not filtered by owner: a self-owned target reports CatSameOwner, not CatNotFound
            match_cat = await self.catalog.get_candidate(user_id, match_cat_id, owned=None)
            user_cat = await self.catalog.get_candidate(user_id, user_cat_id, owned=True)

            if match_cat.user_id == user_cat.user_id:
                self.logger.info(
                    "new_match refused: cats %s and %s share an owner", match_cat.id, user_cat.id
                )
                raise CatSameOwner()
            if match_cat.sex == user_cat.sex:
                self.logger.info(
                    "new_match refused: cats %s and %s have the same sex",
                    match_cat.id,
                    user_cat.id,
                )
                raise CatGenderNotMatch()
            if match_cat.has_matched or user_cat.has_matched:
                self.logger.info("new_match refused: cat already matched")
                raise CatAlreadyMatched()
            if await self.uow.matches.exists_active_between(match_cat.id, user_cat.id):
                self.logger.info(
                    "new_match refused: active match exists between %s and %s",
                    match_cat.id,
                    user_cat.id,
                )
                raise CatAlreadyMatched()

            try:
                match = Match.create(
                    match_cat_id=match_cat.id,
                    user_cat_id=user_cat.id,
                    message=message,
                )
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            created = await self.uow.matches.add(match)
            await self.uow.commit()
        self.logger.info(
            "Match created: id=%s match_cat=%s user_cat=%s issuer=%s",
            created.id,
            created.match_cat_id,
            created.user_cat_id,
            user_id,
        )
        return created

    async def list_matches(self, user_id: UUID) -> list[DetailMatch]:
        async with self._guard("list_matches"):
            details = await self.uow.matches.list_detailed(user_id)
            users = {}
            for detail in details:
                issuer = users.get(detail.issuer_id)
                if issuer is None:
                    issuer = await self.uow.users.get(detail.issuer_id)
                    if issuer is None:
                        self._integrity_fault(detail, UserNotFound())
                    users[detail.issuer_id] = issuer
                detail.issuer = issuer
                try:
                    detail.match_cat = await self.catalog.get_detail(detail.match.match_cat_id)
                    detail.user_cat = await self.catalog.get_detail(detail.match.user_cat_id)
                except CatNotFound as exc:
                    self._integrity_fault(detail, exc)
            return details

    def _integrity_fault(self, detail: DetailMatch, cause: Exception) -> None:
        self.logger.error("Match %s references a missing record: %s", detail.id, cause)
        raise InfrastructureError(
            "match references a missing record",
            details={"match_id": str(detail.id)},
        ) from cause

    async def _load_for_receiver(self, match_id: UUID, user_id: UUID) -> DetailMatch:
        detail = await self.uow.matches.get(match_id)
        # Non-participants get the same answer as for a missing match
        if detail is None or detail.receiver_id != user_id:
            raise MatchNotFound()
        if not detail.is_pending:
            raise MatchNotValid()
        return detail

    async def approve_match(self, match_id: UUID, user_id: UUID) -> None:
        async with self._guard("approve_match"):
            detail = await self._load_for_receiver(match_id, user_id)
            match = detail.match
            match_cat = await self.catalog.get_cat(match.match_cat_id)
            user_cat = await self.catalog.get_cat(match.user_cat_id)
            if match_cat.has_matched or user_cat.has_matched:
                self.logger.info("approve_match refused: match %s has a matched cat", match_id)
                raise CatAlreadyMatched()

            # Write phase: preconditions are re-checked under the same transaction
            locked = await self.uow.matches.get(match_id, for_update=True)
            if locked is None or not locked.is_pending:
                raise MatchNotValid()
            for cat_id in sorted((match.match_cat_id, match.user_cat_id)):
                if not await self.catalog.mark_matched(cat_id):
                    self.logger.info(
                        "approve_match lost a race: cat %s was matched concurrently", cat_id
                    )
                    raise CatAlreadyMatched()
            if not await self.uow.matches.approve(match_id):
                raise MatchNotValid()
            superseded = 0
            for owner_id in sorted({detail.receiver_id, detail.issuer_id}):
                superseded += await self.uow.matches.delete_all_except(owner_id, match_id)
            await self.uow.commit()
        self.logger.info(
            "Match approved: id=%s receiver=%s issuer=%s",
            match_id,
            detail.receiver_id,
            detail.issuer_id,
        )
        if superseded:
            self.logger.info("Matches superseded by %s: count=%d", match_id, superseded)

    async def reject_match(self, match_id: UUID, user_id: UUID) -> None:
        async with self._guard("reject_match"):
            await self._load_for_receiver(match_id, user_id)
            if not await self.uow.matches.delete(match_id):
                raise MatchNotValid()
            await self.uow.commit()
        self.logger.info("Match rejected: id=%s receiver=%s", match_id, user_id)

    async def withdraw_match(self, match_id: UUID, user_id: UUID) -> None:
        async with self._guard("withdraw_match"):
            detail = await self.uow.matches.get(match_id)
            if detail is None or detail.issuer_id != user_id:
                raise MatchNotFound()
            if not detail.is_pending:
                raise MatchNotValid()
            issuer_cat = await self.catalog.get_cat(detail.match.user_cat_id)
            if issuer_cat.has_matched:
                self.logger.info(
                    "withdraw_match refused: cat %s matched elsewhere", issuer_cat.id
                )
                raise CatAlreadyMatched()
            if not await self.uow.matches.delete(match_id):
                raise MatchNotValid()
            await self.uow.commit()
        self.logger.info("Match withdrawn: id=%s issuer=%s", match_id, user_id)

    # Alias matching the HTTP verb used for withdrawal
    delete_match = withdraw_match
