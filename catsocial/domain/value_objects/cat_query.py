from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from catsocial.domain.value_objects.cat_race import CatRace
from catsocial.domain.value_objects.cat_sex import CatSex

DEFAULT_LIMIT = 5

_AGE_OPERATORS = ("=", ">", "<")


def parse_bool_flag(value: str | bool | None) -> bool | None:
    """Parse the closed `"true"`/`"false"` query flag; empty means unset."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"invalid boolean query param: {value}")


@dataclass(frozen=True, slots=True)
class AgeFilter:
    op: str
    months: int

    @classmethod
    def parse(cls, raw: str) -> AgeFilter:
        """Accept `N`, `=N`, `>N` or `<N`."""
        raw = raw.strip()
        op = "="
        number = raw
        if raw[:1] in _AGE_OPERATORS:
            op, number = raw[0], raw[1:]
        try:
            months = int(number)
        except ValueError as exc:
            raise ValueError(f"invalid age in month query param: {raw}") from exc
        return cls(op=op, months=months)


@dataclass(frozen=True, slots=True)
class CatQuery:
    id: UUID | None = None
    race: CatRace | None = None
    sex: CatSex | None = None
    has_matched: bool | None = None
    age: AgeFilter | None = None
    # True: only the caller's cats, False: only other users' cats
    owned: bool | None = None
    search: str | None = None
    limit: int = DEFAULT_LIMIT
    offset: int = 0

    @classmethod
    def parse(
        cls,
        *,
        id: UUID | None = None,
        race: str | None = None,
        sex: str | None = None,
        has_matched: str | bool | None = None,
        age_in_month: str | None = None,
        owned: str | bool | None = None,
        search: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> CatQuery:
        if limit is not None and limit < 0:
            raise ValueError("limit must not be negative")
        if offset is not None and offset < 0:
            raise ValueError("offset must not be negative")
        return cls(
            id=id,
            race=CatRace.parse(race) if race else None,
            sex=CatSex.parse(sex) if sex else None,
            has_matched=parse_bool_flag(has_matched),
            age=AgeFilter.parse(age_in_month) if age_in_month else None,
            owned=parse_bool_flag(owned),
            search=search or None,
            limit=limit or DEFAULT_LIMIT,
            offset=offset or 0,
        )

    @classmethod
    def by_id(cls, cat_id: UUID, *, owned: bool | None = None) -> CatQuery:
        return cls(id=cat_id, owned=owned, limit=1)
