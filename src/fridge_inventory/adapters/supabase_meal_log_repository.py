"""Supabase repository for meal transactions."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from fridge_inventory.adapters.supabase_errors import SUPABASE_ERRORS
from fridge_inventory.domain.errors import TransactionLogError
from fridge_inventory.domain.meals import MealTransaction
from fridge_inventory.services.transactions import MealTransactionRepository


@dataclass
class SupabaseMealLogRepository(MealTransactionRepository):
    """Supabase implementation for meal logs."""

    client: Client

    def create_meal_log(self, transaction: MealTransaction) -> UUID:
        """Create a meal log row and return its id."""
        context = transaction.context
        requested = transaction.requested_payload()
        try:
            response = (
                self.client.table("meal_logs")
                .insert(
                    {
                        "user_id": str(transaction.user_id),
                        "meal_name": context.meal_name,
                        "meal_photo_url": context.image_url,
                        "meal_type": context.meal_type.value
                        if context.meal_type
                        else None,
                        "ingredients_detected": requested,
                        "ingredients_logged": requested,
                        "deduction_results": transaction.outcomes_payload(),
                        "logged_at": context.logged_at.isoformat(),
                        "created_at": transaction.created_at.isoformat(),
                    }
                )
                .execute()
            )
        except SUPABASE_ERRORS as exc:
            raise TransactionLogError(f"Failed to create meal log: {exc}") from exc
        if not response.data:
            raise TransactionLogError("Failed to create meal log")
        return UUID(str(response.data[0]["id"]))
