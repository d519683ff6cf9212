"""Domain models for meal deductions and their transaction records."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from fridge_inventory.domain.inventory import ConsumedIngredient

NOT_FOUND_REASON = "Not found in inventory"
NOT_FOUND_SUGGESTION = "Add to shopping list"
DEDUCTION_FAILED_REASON = "Deduction failed"
INSUFFICIENT_QUANTITY_NOTE = "Insufficient quantity: deducted available amount"


class MealType(Enum):
    """Meal slot a logged meal belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MealContext:
    """Batch metadata stored with a meal transaction."""

    logged_at: datetime
    image_url: str | None = None
    meal_type: MealType | None = None
    meal_name: str | None = None


@dataclass(frozen=True)
class UsageLogEntry:
    """Append-only record of inventory consumed by a meal."""

    user_id: UUID
    item_id: int | str
    amount_used: float
    unit: str | None
    used_at: datetime
    notes: str | None = None
    usage_type: str = "meal"


@dataclass(frozen=True)
class IngredientOutcome:
    """Result of processing one consumed ingredient."""

    success: bool
    ingredient: str
    item_id: int | str | None = None
    item_name: str | None = None
    previous_quantity: float | None = None
    deducted: float | None = None
    new_quantity: float | None = None
    unit: str | None = None
    confidence: int | None = None
    match_method: str | None = None
    item_deleted: bool = False
    note: str | None = None
    reason: str | None = None
    suggestion: str | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, object]:
        """Return the wire representation, omitting unset fields."""
        payload = {
            "success": self.success,
            "ingredient": self.ingredient,
            "itemId": self.item_id,
            "itemName": self.item_name,
            "previousQuantity": self.previous_quantity,
            "deducted": self.deducted,
            "newQuantity": self.new_quantity,
            "unit": self.unit,
            "confidence": self.confidence,
            "matchMethod": self.match_method,
            "itemDeleted": self.item_deleted if self.success else None,
            "note": self.note,
            "reason": self.reason,
            "suggestion": self.suggestion,
            "error": self.error,
        }
        return {key: value for key, value in payload.items() if value is not None}


@dataclass(frozen=True)
class MealTransaction:
    """One persisted record per deduction batch."""

    user_id: UUID
    requested: tuple[ConsumedIngredient, ...]
    outcomes: tuple[IngredientOutcome, ...]
    context: MealContext
    created_at: datetime

    def requested_payload(self) -> list[dict[str, object]]:
        return [asdict(ingredient) for ingredient in self.requested]

    def outcomes_payload(self) -> list[dict[str, object]]:
        return [outcome.as_dict() for outcome in self.outcomes]


@dataclass(frozen=True)
class DeductionReport:
    """Structured per-ingredient breakdown returned to callers."""

    deducted: list[IngredientOutcome]
    errors: list[IngredientOutcome]
    total_ingredients: int
    meal_log_id: UUID | None = None
    success: bool = True

    def as_dict(self) -> dict[str, object]:
        return {
            "success": self.success,
            "mealLogId": str(self.meal_log_id) if self.meal_log_id else None,
            "deducted": [outcome.as_dict() for outcome in self.deducted],
            "errors": [outcome.as_dict() for outcome in self.errors],
            "summary": {
                "totalIngredients": self.total_ingredients,
                "successfulDeductions": len(self.deducted),
                "failedDeductions": len(self.errors),
            },
        }


@dataclass(frozen=True)
class ConsumptionSummary:
    """Meal usage totals over a time range."""

    start: datetime
    end: datetime
    entry_count: int
    items_touched: int
    totals_by_unit: dict[str, float] = field(default_factory=dict)
