"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from fridge_inventory.adapters.supabase_inventory_repository import (
    SupabaseInventoryRepository,
)
from fridge_inventory.adapters.supabase_meal_log_repository import (
    SupabaseMealLogRepository,
)
from fridge_inventory.adapters.supabase_preference_repository import (
    SupabasePreferenceRepository,
)
from fridge_inventory.adapters.supabase_usage_repository import (
    SupabaseUsageRepository,
)
from fridge_inventory.config import Settings
from fridge_inventory.services.deductions import DeductionExecutor
from fridge_inventory.services.matcher import IngredientMatcher
from fridge_inventory.services.meals import MealLogService
from fridge_inventory.services.preferences import PreferenceService
from fridge_inventory.services.transactions import TransactionLogger
from fridge_inventory.services.usage import UsageService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    preference_service: PreferenceService
    meal_log_service: MealLogService
    usage_service: UsageService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    inventory_repository = SupabaseInventoryRepository(supabase_client)
    usage_repository = SupabaseUsageRepository(supabase_client)
    preference_repository = SupabasePreferenceRepository(supabase_client)
    meal_log_repository = SupabaseMealLogRepository(supabase_client)

    preference_service = PreferenceService(
        preference_repository,
        confidence_step=resolved_settings.preference_confidence_step,
    )
    matcher = IngredientMatcher(
        preference_service=preference_service,
        match_threshold=resolved_settings.match_threshold,
    )
    meal_log_service = MealLogService(
        inventory_repository=inventory_repository,
        matcher=matcher,
        preference_service=preference_service,
        executor=DeductionExecutor(inventory_repository, usage_repository),
        transaction_logger=TransactionLogger(meal_log_repository),
    )
    return AppContainer(
        settings=resolved_settings,
        preference_service=preference_service,
        meal_log_service=meal_log_service,
        usage_service=UsageService(usage_repository),
    )
