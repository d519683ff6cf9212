"""Applying matched deductions to the inventory."""

import logging
import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Protocol
from uuid import UUID

from fridge_inventory.domain.errors import (
    InventoryWriteError,
    QuantityParseError,
    UsageLogError,
)
from fridge_inventory.domain.inventory import ConsumedIngredient, InventoryItem
from fridge_inventory.domain.matching import MatchResult
from fridge_inventory.domain.meals import (
    DEDUCTION_FAILED_REASON,
    INSUFFICIENT_QUANTITY_NOTE,
    IngredientOutcome,
    UsageLogEntry,
)
from fridge_inventory.services.units import UnitConverter
from fridge_inventory.services.usage import UsageLogRepository

_logger = logging.getLogger(__name__)

_QUANTITY_DECIMALS = 4


class InventoryRepository(Protocol):
    """Persistence interface for fridge items."""

    def list_active_items(self, user_id: UUID) -> list[InventoryItem]:
        """Return items that have not been removed."""

    def update_quantity(
        self, item_id: int | str, quantity: float, updated_at: datetime
    ) -> None:
        """Set the stored quantity of an item."""

    def delete_item(self, item_id: int | str, deleted_at: datetime) -> None:
        """Remove an item from the active inventory."""


def parse_quantity(value: object) -> float:
    """Read a stored quantity as a non-negative number.

    Raises QuantityParseError rather than defaulting, so a corrupt row fails
    its own ingredient instead of being treated as empty.
    """
    if isinstance(value, bool) or value is None:
        raise QuantityParseError(f"Invalid stored quantity: {value!r}")
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, Decimal | str):
        try:
            number = float(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError) as exc:
            raise QuantityParseError(f"Invalid stored quantity: {value!r}") from exc
    else:
        raise QuantityParseError(f"Invalid stored quantity: {value!r}")
    if math.isnan(number) or math.isinf(number) or number < 0:
        raise QuantityParseError(f"Invalid stored quantity: {value!r}")
    return number


@dataclass
class DeductionExecutor:
    """Writes one ingredient's deduction and its usage log entry."""

    inventory_repository: InventoryRepository
    usage_repository: UsageLogRepository
    converter: UnitConverter = field(default_factory=UnitConverter)

    def apply(
        self, user_id: UUID, ingredient: ConsumedIngredient, match: MatchResult
    ) -> IngredientOutcome:
        """Deduct the consumed amount from the matched item."""
        item = match.item
        try:
            available = parse_quantity(item.quantity)
        except QuantityParseError as exc:
            _logger.warning("Cannot deduct %s: %s", ingredient.name, exc)
            return _failed(ingredient, match, exc)

        conversion = self.converter.compute(
            required_quantity=ingredient.quantity,
            required_unit=ingredient.unit,
            available_quantity=available,
            available_unit=item.unit,
            weight_equivalent=item.weight_equivalent,
            category=item.category,
        )
        deducted = conversion.amount
        new_quantity = max(round(available - deducted, _QUANTITY_DECIMALS), 0.0)
        depleted = new_quantity == 0
        now = datetime.now(tz=UTC)
        write_error: InventoryWriteError | None = None
        try:
            if depleted:
                self.inventory_repository.delete_item(item.id, deleted_at=now)
            else:
                self.inventory_repository.update_quantity(
                    item.id, new_quantity, updated_at=now
                )
        except InventoryWriteError as exc:
            _logger.warning("Deduction write failed for %s: %s", ingredient.name, exc)
            write_error = exc

        write_failed = write_error is not None
        self._log_usage(user_id, ingredient, item, deducted, now, write_failed)
        if write_error is not None:
            return _failed(ingredient, match, write_error)
        if conversion.clamped:
            _logger.info(
                "Clamped %s to available %s %s",
                ingredient.name,
                available,
                item.unit,
            )
        return IngredientOutcome(
            success=True,
            ingredient=ingredient.name,
            item_id=item.id,
            item_name=item.name,
            previous_quantity=available,
            deducted=deducted,
            new_quantity=new_quantity,
            unit=item.unit or ingredient.unit,
            confidence=match.confidence,
            match_method=match.method.value,
            item_deleted=depleted,
            note=INSUFFICIENT_QUANTITY_NOTE if conversion.clamped else None,
        )

    def _log_usage(
        self,
        user_id: UUID,
        ingredient: ConsumedIngredient,
        item: InventoryItem,
        deducted: float,
        used_at: datetime,
        write_failed: bool = False,
    ) -> None:
        notes = f"Meal deduction: {ingredient.name} -> {item.name}"
        if write_failed:
            notes = f"{notes} (inventory update failed)"
        entry = UsageLogEntry(
            user_id=user_id,
            item_id=item.id,
            amount_used=deducted,
            unit=item.unit or ingredient.unit,
            used_at=used_at,
            notes=notes,
        )
        try:
            self.usage_repository.append_usage(entry)
        except UsageLogError as exc:
            _logger.warning("Usage log failed for %s: %s", item.id, exc)


def _failed(
    ingredient: ConsumedIngredient, match: MatchResult, exc: Exception
) -> IngredientOutcome:
    return IngredientOutcome(
        success=False,
        ingredient=ingredient.name,
        item_id=match.item.id,
        item_name=match.item.name,
        confidence=match.confidence,
        match_method=match.method.value,
        reason=DEDUCTION_FAILED_REASON,
        error=str(exc),
    )
