"""Meal logging service that deducts consumed ingredients from inventory."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from uuid import UUID

from fridge_inventory.domain.errors import PreferenceStoreError
from fridge_inventory.domain.inventory import ConsumedIngredient, InventoryItem
from fridge_inventory.domain.matching import MatchResult
from fridge_inventory.domain.meals import (
    NOT_FOUND_REASON,
    NOT_FOUND_SUGGESTION,
    DeductionReport,
    IngredientOutcome,
    MealContext,
    MealTransaction,
)
from fridge_inventory.services.deductions import DeductionExecutor, InventoryRepository
from fridge_inventory.services.matcher import IngredientMatcher
from fridge_inventory.services.preferences import PreferenceService
from fridge_inventory.services.transactions import TransactionLogger

_logger = logging.getLogger(__name__)


@dataclass
class MealLogService:
    """Matches consumed ingredients, deducts them and records the meal."""

    inventory_repository: InventoryRepository
    matcher: IngredientMatcher
    preference_service: PreferenceService
    executor: DeductionExecutor
    transaction_logger: TransactionLogger

    def deduct(
        self,
        user_id: UUID,
        consumed_ingredients: Sequence[ConsumedIngredient],
        context: MealContext | None = None,
    ) -> DeductionReport:
        """Deduct every ingredient and record one meal transaction.

        Ingredient failures are reported in the returned breakdown. Errors
        loading the inventory or saving the transaction propagate.
        """
        resolved_context = context or MealContext(logged_at=datetime.now(tz=UTC))
        inventory = [
            item
            for item in self.inventory_repository.list_active_items(user_id)
            if item.is_active
        ]
        _logger.info(
            "Processing deduction for %s ingredients against %s items",
            len(consumed_ingredients),
            len(inventory),
        )

        deducted: list[IngredientOutcome] = []
        errors: list[IngredientOutcome] = []
        for ingredient in consumed_ingredients:
            outcome = self._process(user_id, ingredient, inventory)
            if outcome.success:
                deducted.append(outcome)
            else:
                errors.append(outcome)

        transaction = MealTransaction(
            user_id=user_id,
            requested=tuple(consumed_ingredients),
            outcomes=tuple(deducted + errors),
            context=resolved_context,
            created_at=datetime.now(tz=UTC),
        )
        meal_log_id = self.transaction_logger.record(transaction)
        return DeductionReport(
            deducted=deducted,
            errors=errors,
            total_ingredients=len(consumed_ingredients),
            meal_log_id=meal_log_id,
        )

    def _process(
        self,
        user_id: UUID,
        ingredient: ConsumedIngredient,
        inventory: list[InventoryItem],
    ) -> IngredientOutcome:
        match = self.matcher.match(user_id, ingredient, inventory)
        if match is None:
            return IngredientOutcome(
                success=False,
                ingredient=ingredient.name,
                reason=NOT_FOUND_REASON,
                suggestion=NOT_FOUND_SUGGESTION,
            )
        self._learn(user_id, ingredient, match)
        outcome = self.executor.apply(user_id, ingredient, match)
        if outcome.success:
            _refresh_snapshot(inventory, match.item, outcome)
        return outcome

    def _learn(
        self, user_id: UUID, ingredient: ConsumedIngredient, match: MatchResult
    ) -> None:
        try:
            self.preference_service.record_match(user_id, ingredient.name, match)
        except PreferenceStoreError as exc:
            _logger.warning(
                "Could not record preference for %s: %s", ingredient.name, exc
            )


def _refresh_snapshot(
    inventory: list[InventoryItem], item: InventoryItem, outcome: IngredientOutcome
) -> None:
    """Apply a successful write to the in-memory inventory."""
    index = next(
        (position for position, entry in enumerate(inventory) if entry.id == item.id),
        None,
    )
    if index is None:
        return
    if outcome.item_deleted:
        del inventory[index]
    else:
        inventory[index] = replace(item, quantity=outcome.new_quantity)
