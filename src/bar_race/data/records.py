"""Typed records produced by the frame builder."""

from dataclasses import dataclass
from enum import Enum

from ..constants import FALLBACK_COLOR, REGION_COLORS, UNCATEGORIZED_LABEL


class Region(str, Enum):
    """Known categories with a dedicated palette color."""

    AFRICA = "Africa"
    AMERICAS = "Americas"
    ASIA = "Asia"
    EUROPE = "Europe"
    OCEANIA = "Oceania"

    @classmethod
    def parse(cls, value: str) -> "Region | None":
        for region in cls:
            if region.value == value:
                return region
        return None


class CategoryFallback(str, Enum):
    """Policy for rows whose category column is absent or unknown."""

    ENTITY = "entity"  # Keep the raw cell, or the entity name when it is blank
    UNCATEGORIZED = "uncategorized"  # One shared bucket for all of them


@dataclass(frozen=True, slots=True)
class Category:
    """Either a known region or a fallback key."""

    key: str
    region: Region | None = None

    @classmethod
    def of_region(cls, region: Region) -> "Category":
        return cls(key=region.value, region=region)

    @classmethod
    def fallback(cls, key: str) -> "Category":
        return cls(key=key, region=None)

    @property
    def is_fallback(self) -> bool:
        return self.region is None

    @property
    def color(self) -> tuple[int, int, int]:
        if self.region is None:
            return FALLBACK_COLOR
        return REGION_COLORS.get(self.region.value, FALLBACK_COLOR)


def resolve_category(
    raw: str | None, entity_name: str, policy: CategoryFallback
) -> Category:
    """
    Map a raw category cell to a Category.

    Args:
        raw: Category column value, or None when the column is absent
        entity_name: Cleaned entity name, used by the ENTITY policy when raw is blank
        policy: What to do when raw is missing or not a known region

    Returns:
        A region category, or a fallback category keyed per policy
    """
    text = (raw or "").strip()
    region = Region.parse(text)
    if region is not None:
        return Category.of_region(region)
    if policy is CategoryFallback.UNCATEGORIZED:
        return Category.fallback(UNCATEGORIZED_LABEL)
    return Category.fallback(text or entity_name)


@dataclass(frozen=True, slots=True)
class Entity:
    """One entity's metric value within a period."""

    name: str
    value: int
    category: Category
    period: int
    decoration: str = ""


@dataclass(frozen=True, slots=True)
class Frame:
    """All entities recorded for one period, in input order."""

    period: int
    entities: tuple[Entity, ...]

    def __len__(self) -> int:
        return len(self.entities)
