"""Domain models for fridge inventory."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class FoodCategory(Enum):
    """Closed set of categories used by unit heuristics."""

    PROTEIN = "protein"
    VEGETABLE = "vegetable"
    FRUIT = "fruit"
    GRAIN = "grain"
    DAIRY = "dairy"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: str | None) -> "FoodCategory":
        """Map a stored category label to a member, falling back to OTHER."""
        if not raw:
            return cls.OTHER
        key = raw.strip().lower()
        if key in _CATEGORY_ALIASES:
            return _CATEGORY_ALIASES[key]
        for keyword, category in _CATEGORY_KEYWORDS:
            if keyword in key:
                return category
        return cls.OTHER


_CATEGORY_ALIASES: dict[str, FoodCategory] = {
    "protein": FoodCategory.PROTEIN,
    "proteins": FoodCategory.PROTEIN,
    "meat": FoodCategory.PROTEIN,
    "meat & seafood": FoodCategory.PROTEIN,
    "seafood": FoodCategory.PROTEIN,
    "poultry": FoodCategory.PROTEIN,
    "vegetable": FoodCategory.VEGETABLE,
    "vegetables": FoodCategory.VEGETABLE,
    "produce": FoodCategory.VEGETABLE,
    "fruit": FoodCategory.FRUIT,
    "fruits": FoodCategory.FRUIT,
    "grain": FoodCategory.GRAIN,
    "grains": FoodCategory.GRAIN,
    "bakery & bread": FoodCategory.GRAIN,
    "bread": FoodCategory.GRAIN,
    "dairy": FoodCategory.DAIRY,
    "dairy & eggs": FoodCategory.DAIRY,
}

_CATEGORY_KEYWORDS: tuple[tuple[str, FoodCategory], ...] = (
    ("meat", FoodCategory.PROTEIN),
    ("seafood", FoodCategory.PROTEIN),
    ("protein", FoodCategory.PROTEIN),
    ("vegetable", FoodCategory.VEGETABLE),
    ("produce", FoodCategory.VEGETABLE),
    ("fruit", FoodCategory.FRUIT),
    ("grain", FoodCategory.GRAIN),
    ("bread", FoodCategory.GRAIN),
    ("dairy", FoodCategory.DAIRY),
)


@dataclass(frozen=True)
class InventoryItem:
    """An item in a user's fridge.

    ``quantity`` holds the value as stored; it is parsed to a number only when a
    deduction is applied so that a malformed row fails a single ingredient.
    """

    id: int | str
    user_id: UUID
    name: str
    category: str | None
    quantity: float | str | None
    unit: str | None
    weight_equivalent: float | None = None
    expiration_date: date | None = None
    deleted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None


@dataclass(frozen=True)
class ConsumedIngredient:
    """An ingredient reported as eaten, from photo analysis or a recipe."""

    name: str
    quantity: float
    unit: str | None = None
    category: str | None = None
