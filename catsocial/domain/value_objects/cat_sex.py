from __future__ import annotations

from enum import Enum


class CatSex(str, Enum):
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value: str | CatSex) -> CatSex:
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"invalid cat sex: {value}") from exc
