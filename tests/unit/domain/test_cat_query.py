from __future__ import annotations

from uuid import uuid4

import pytest

from catsocial.domain.value_objects.cat_query import (
    DEFAULT_LIMIT,
    AgeFilter,
    CatQuery,
    parse_bool_flag,
)
from catsocial.domain.value_objects.cat_race import CatRace
from catsocial.domain.value_objects.cat_sex import CatSex


@pytest.mark.parametrize(
    ("raw", "op", "months"),
    [("12", "=", 12), ("=12", "=", 12), (">6", ">", 6), ("<24", "<", 24)],
)
def test_age_filter_parses_operator_prefix(raw, op, months):
    age = AgeFilter.parse(raw)
    assert (age.op, age.months) == (op, months)


@pytest.mark.parametrize("raw", [">", "abc", ">=5", "!3"])
def test_age_filter_rejects_garbage(raw):
    with pytest.raises(ValueError):
        AgeFilter.parse(raw)


def test_bool_flag_is_a_closed_set():
    assert parse_bool_flag("true") is True
    assert parse_bool_flag("false") is False
    assert parse_bool_flag("") is None
    assert parse_bool_flag(None) is None
    with pytest.raises(ValueError):
        parse_bool_flag("yes")


def test_parse_defaults():
    query = CatQuery.parse()
    assert query.limit == DEFAULT_LIMIT
    assert query.offset == 0
    assert query.owned is None
    assert query.has_matched is None


def test_parse_converts_enums_and_flags():
    cat_id = uuid4()
    query = CatQuery.parse(
        id=cat_id,
        race="Maine Coon",
        sex="male",
        has_matched="false",
        owned="true",
        age_in_month=">3",
        search="mo",
        limit=10,
        offset=20,
    )
    assert query.id == cat_id
    assert query.race is CatRace.MAINE_COON
    assert query.sex is CatSex.MALE
    assert query.has_matched is False
    assert query.owned is True
    assert query.age == AgeFilter(op=">", months=3)
    assert (query.limit, query.offset) == (10, 20)


@pytest.mark.parametrize(
    "kwargs",
    [{"race": "Tabby"}, {"sex": "unknown"}, {"owned": "maybe"}, {"offset": -1}],
)
def test_parse_rejects_values_outside_closed_sets(kwargs):
    with pytest.raises(ValueError):
        CatQuery.parse(**kwargs)


def test_by_id_targets_a_single_row():
    cat_id = uuid4()
    query = CatQuery.by_id(cat_id, owned=True)
    assert query.id == cat_id
    assert query.owned is True
    assert query.limit == 1
