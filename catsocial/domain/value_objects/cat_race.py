from __future__ import annotations

from enum import Enum


class CatRace(str, Enum):
    PERSIAN = "Persian"
    MAINE_COON = "Maine Coon"
    SIAMESE = "Siamese"
    RAGDOLL = "Ragdoll"
    BENGAL = "Bengal"
    SPHYNX = "Sphynx"
    BRITISH_SHORTHAIR = "British Shorthair"
    ABYSSINIAN = "Abyssinian"
    SCOTTISH_FOLD = "Scottish Fold"
    BIRMAN = "Birman"

    @classmethod
    def parse(cls, value: str | CatRace) -> CatRace:
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"invalid cat race: {value}") from exc
