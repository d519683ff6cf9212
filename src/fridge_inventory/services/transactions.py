"""Meal transaction logging."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from fridge_inventory.domain.meals import MealTransaction

_logger = logging.getLogger(__name__)


class MealTransactionRepository(Protocol):
    """Persistence interface for meal transactions."""

    def create_meal_log(self, transaction: MealTransaction) -> UUID:
        """Insert a meal log row and return its id."""


@dataclass
class TransactionLogger:
    """Records one meal transaction per deduction batch.

    Failures raise TransactionLogError and are not handled here: a batch whose
    transaction cannot be stored fails as a whole.
    """

    repository: MealTransactionRepository

    def record(self, transaction: MealTransaction) -> UUID:
        """Persist the transaction and return the meal log id."""
        meal_log_id = self.repository.create_meal_log(transaction)
        _logger.info(
            "Meal log %s saved with %s ingredients",
            meal_log_id,
            len(transaction.requested),
        )
        return meal_log_id
