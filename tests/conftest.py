"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from uuid import UUID, uuid4

import pytest

from fridge_inventory.config import Settings
from fridge_inventory.containers import AppContainer
from fridge_inventory.domain.errors import (
    InventoryReadError,
    InventoryWriteError,
    PreferenceStoreError,
    TransactionLogError,
    UsageLogError,
)
from fridge_inventory.domain.inventory import InventoryItem
from fridge_inventory.domain.matching import UserIngredientPreference
from fridge_inventory.domain.meals import MealTransaction, UsageLogEntry
from fridge_inventory.services.deductions import DeductionExecutor, InventoryRepository
from fridge_inventory.services.matcher import IngredientMatcher
from fridge_inventory.services.meals import MealLogService
from fridge_inventory.services.preferences import (
    PreferenceRepository,
    PreferenceService,
)
from fridge_inventory.services.transactions import (
    MealTransactionRepository,
    TransactionLogger,
)
from fridge_inventory.services.usage import UsageLogRepository, UsageService

USER_ID = UUID("7d9f6c1e-2a4b-4c8d-9e0f-1a2b3c4d5e6f")


def make_item(  # noqa: PLR0913
    item_id: int,
    name: str,
    quantity: float | str | None,
    unit: str | None = "pieces",
    category: str | None = None,
    weight_equivalent: float | None = None,
    expiration_date: date | None = None,
    user_id: UUID = USER_ID,
) -> InventoryItem:
    return InventoryItem(
        id=item_id,
        user_id=user_id,
        name=name,
        category=category,
        quantity=quantity,
        unit=unit,
        weight_equivalent=weight_equivalent,
        expiration_date=expiration_date,
    )


@dataclass
class InMemoryInventoryRepository(InventoryRepository):
    """In-memory fridge items for tests."""

    items: list[InventoryItem] = field(default_factory=list)
    failing_ids: set[int | str] = field(default_factory=set)
    unavailable: bool = False
    updates: list[tuple[int | str, float]] = field(default_factory=list)
    deletions: list[int | str] = field(default_factory=list)

    def add(self, *items: InventoryItem) -> None:
        self.items.extend(items)

    def get(self, item_id: int | str) -> InventoryItem:
        return next(item for item in self.items if item.id == item_id)

    def list_active_items(self, user_id: UUID) -> list[InventoryItem]:
        if self.unavailable:
            raise InventoryReadError("inventory unavailable")
        return [
            item
            for item in self.items
            if item.user_id == user_id and item.deleted_at is None
        ]

    def update_quantity(
        self, item_id: int | str, quantity: float, updated_at: datetime
    ) -> None:
        self._check(item_id)
        self._replace(item_id, quantity=quantity)
        self.updates.append((item_id, quantity))

    def delete_item(self, item_id: int | str, deleted_at: datetime) -> None:
        self._check(item_id)
        self._replace(item_id, deleted_at=deleted_at)
        self.deletions.append(item_id)

    def _check(self, item_id: int | str) -> None:
        if item_id in self.failing_ids:
            raise InventoryWriteError(f"write rejected for {item_id}")

    def _replace(self, item_id: int | str, **changes: object) -> None:
        for index, item in enumerate(self.items):
            if item.id == item_id:
                self.items[index] = replace(item, **changes)
                return
        raise InventoryWriteError(f"Inventory item {item_id} not found")


@dataclass
class InMemoryUsageRepository(UsageLogRepository):
    """In-memory usage log for tests."""

    entries: list[UsageLogEntry] = field(default_factory=list)
    fail: bool = False

    def append_usage(self, entry: UsageLogEntry) -> None:
        if self.fail:
            raise UsageLogError("usage log unavailable")
        self.entries.append(entry)

    def list_usage(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[UsageLogEntry]:
        return [entry for entry in self.entries if entry.user_id == user_id]


@dataclass
class InMemoryPreferenceRepository(PreferenceRepository):
    """In-memory ingredient preferences for tests."""

    preferences: dict[UUID, UserIngredientPreference] = field(default_factory=dict)
    unavailable: bool = False

    def list_preferences(
        self, user_id: UUID, scanned_name: str
    ) -> list[UserIngredientPreference]:
        self._check()
        return [
            preference
            for preference in self.preferences.values()
            if preference.user_id == user_id
            and preference.scanned_name == scanned_name
        ]

    def get_preference(
        self, user_id: UUID, scanned_name: str, matched_item_name: str
    ) -> UserIngredientPreference | None:
        self._check()
        for preference in self.list_preferences(user_id, scanned_name):
            if preference.matched_item_name == matched_item_name:
                return preference
        return None

    def create_preference(  # noqa: PLR0913
        self,
        user_id: UUID,
        scanned_name: str,
        matched_item_name: str,
        confidence_score: int,
        used_at: datetime,
    ) -> UserIngredientPreference:
        self._check()
        preference = UserIngredientPreference(
            id=uuid4(),
            user_id=user_id,
            scanned_name=scanned_name,
            matched_item_name=matched_item_name,
            confidence_score=confidence_score,
            match_count=1,
            last_used=used_at,
        )
        self.preferences[preference.id] = preference
        return preference

    def update_preference(
        self,
        preference_id: UUID,
        confidence_score: int,
        match_count: int,
        used_at: datetime,
    ) -> None:
        self._check()
        self.preferences[preference_id] = replace(
            self.preferences[preference_id],
            confidence_score=confidence_score,
            match_count=match_count,
            last_used=used_at,
        )

    def _check(self) -> None:
        if self.unavailable:
            raise PreferenceStoreError("preference store unavailable")


@dataclass
class InMemoryMealLogRepository(MealTransactionRepository):
    """In-memory meal transactions for tests."""

    transactions: dict[UUID, MealTransaction] = field(default_factory=dict)
    fail: bool = False

    def create_meal_log(self, transaction: MealTransaction) -> UUID:
        if self.fail:
            raise TransactionLogError("meal log unavailable")
        meal_log_id = uuid4()
        self.transactions[meal_log_id] = transaction
        return meal_log_id


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZV9yb2xlIn0.signature"
        ),
    )


@pytest.fixture
def inventory_repository() -> InMemoryInventoryRepository:
    return InMemoryInventoryRepository()


@pytest.fixture
def usage_repository() -> InMemoryUsageRepository:
    return InMemoryUsageRepository()


@pytest.fixture
def preference_repository() -> InMemoryPreferenceRepository:
    return InMemoryPreferenceRepository()


@pytest.fixture
def meal_log_repository() -> InMemoryMealLogRepository:
    return InMemoryMealLogRepository()


@pytest.fixture
def preference_service(
    preference_repository: InMemoryPreferenceRepository,
) -> PreferenceService:
    return PreferenceService(preference_repository)


@pytest.fixture
def meal_log_service(
    inventory_repository: InMemoryInventoryRepository,
    usage_repository: InMemoryUsageRepository,
    preference_service: PreferenceService,
    meal_log_repository: InMemoryMealLogRepository,
) -> MealLogService:
    return MealLogService(
        inventory_repository=inventory_repository,
        matcher=IngredientMatcher(preference_service=preference_service),
        preference_service=preference_service,
        executor=DeductionExecutor(inventory_repository, usage_repository),
        transaction_logger=TransactionLogger(meal_log_repository),
    )


@pytest.fixture
def container(
    settings: Settings,
    preference_service: PreferenceService,
    meal_log_service: MealLogService,
    usage_repository: InMemoryUsageRepository,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        preference_service=preference_service,
        meal_log_service=meal_log_service,
        usage_service=UsageService(usage_repository),
    )
