from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from urllib.parse import urlparse
from uuid import UUID

from catsocial.domain.value_objects.cat_race import CatRace
from catsocial.domain.value_objects.cat_sex import CatSex
from catsocial.domain.value_objects.ids import new_id

NAME_MAX_LENGTH = 30
DESCRIPTION_MAX_LENGTH = 200
AGE_IN_MONTH_MIN = 1
# Published upper bound of the public API, likely a typo for a smaller value.
AGE_IN_MONTH_MAX = 120082


def is_valid_image_url(value: str) -> bool:
    if not value:
        return False
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def validate_cat_fields(
    *,
    name: str,
    age_in_month: int,
    description: str,
    image_urls: list[str],
) -> None:
    """Raise ValueError describing every rule a cat payload breaks."""
    problems: list[str] = []
    if not 1 <= len(name) <= NAME_MAX_LENGTH:
        problems.append(f"name must be between 1 and {NAME_MAX_LENGTH} characters")
    if not AGE_IN_MONTH_MIN <= age_in_month <= AGE_IN_MONTH_MAX:
        problems.append(
            f"age must be between {AGE_IN_MONTH_MIN} and {AGE_IN_MONTH_MAX} months"
        )
    if not 1 <= len(description) <= DESCRIPTION_MAX_LENGTH:
        problems.append(
            f"description must be between 1 and {DESCRIPTION_MAX_LENGTH} characters"
        )
    if not image_urls:
        problems.append("imageUrls is required")
    for idx, url in enumerate(image_urls):
        if not url:
            problems.append(f"image URL [{idx}] is required")
        elif not is_valid_image_url(url):
            problems.append(f"invalid image URL [{idx}]: {url}")
    if problems:
        raise ValueError("; ".join(problems))


@dataclass(slots=True)
class Cat:
    id: UUID
    user_id: UUID
    name: str
    race: CatRace
    sex: CatSex
    age_in_month: int
    description: str
    image_urls: list[str] = field(default_factory=list)
    has_matched: bool = False
    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @classmethod
    def create(
        cls,
        user_id: UUID,
        name: str,
        race: CatRace | str,
        sex: CatSex | str,
        age_in_month: int,
        description: str,
        image_urls: list[str],
    ) -> Cat:
        race = CatRace.parse(race)
        sex = CatSex.parse(sex)
        validate_cat_fields(
            name=name,
            age_in_month=age_in_month,
            description=description,
            image_urls=image_urls,
        )
        now = datetime.now(timezone.utc)
        return cls(
            id=new_id(),
            user_id=user_id,
            name=name,
            race=race,
            sex=sex,
            age_in_month=age_in_month,
            description=description,
            image_urls=list(image_urls),
            has_matched=False,
            created_at=now,
            updated_at=now,
        )

    def apply_changes(
        self,
        *,
        name: str,
        race: CatRace | str,
        sex: CatSex | str,
        age_in_month: int,
        description: str,
        image_urls: list[str],
    ) -> None:
        """Replace the owner-editable fields; `has_matched` is left untouched."""
        race = CatRace.parse(race)
        sex = CatSex.parse(sex)
        validate_cat_fields(
            name=name,
            age_in_month=age_in_month,
            description=description,
            image_urls=image_urls,
        )
        self.name = name
        self.race = race
        self.sex = sex
        self.age_in_month = age_in_month
        self.description = description
        self.image_urls = list(image_urls)
        self.updated_at = datetime.now(timezone.utc)
