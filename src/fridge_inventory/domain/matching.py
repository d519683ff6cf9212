"""Domain models for ingredient matching."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from fridge_inventory.domain.inventory import InventoryItem

MAX_CONFIDENCE = 100


class MatchMethod(Enum):
    """How an inventory item was matched to a consumed ingredient."""

    EXACT = "exact"
    CONTAINS = "contains"
    NORMALIZED = "normalized"
    SEMANTIC = "semantic"
    TOKEN_OVERLAP = "token_overlap"
    CATEGORY_FALLBACK = "category_fallback"
    USER_PREFERENCE = "user_preference"


@dataclass(frozen=True)
class MatchResult:
    """Best inventory candidate with its confidence score."""

    item: InventoryItem
    confidence: int
    method: MatchMethod


@dataclass(frozen=True)
class UserIngredientPreference:
    """Learned mapping from a scanned name to an inventory item name."""

    id: UUID
    user_id: UUID
    scanned_name: str
    matched_item_name: str
    confidence_score: int
    match_count: int
    last_used: datetime | None
