"""Tests for applying deductions to inventory."""

from decimal import Decimal

import pytest

from fridge_inventory.domain.errors import QuantityParseError
from fridge_inventory.domain.inventory import ConsumedIngredient, InventoryItem
from fridge_inventory.domain.matching import MatchMethod, MatchResult
from fridge_inventory.domain.meals import (
    DEDUCTION_FAILED_REASON,
    INSUFFICIENT_QUANTITY_NOTE,
)
from fridge_inventory.services.deductions import DeductionExecutor, parse_quantity
from tests.conftest import (
    USER_ID,
    InMemoryInventoryRepository,
    InMemoryUsageRepository,
    make_item,
)


def _setup(
    item: InventoryItem,
) -> tuple[DeductionExecutor, InMemoryInventoryRepository, InMemoryUsageRepository]:
    inventory = InMemoryInventoryRepository()
    inventory.add(item)
    usage = InMemoryUsageRepository()
    return DeductionExecutor(inventory, usage), inventory, usage


def _match(item: InventoryItem) -> MatchResult:
    return MatchResult(item=item, confidence=90, method=MatchMethod.CONTAINS)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(3, 3.0), (2.5, 2.5), ("1.75", 1.75), (" 4 ", 4.0), (Decimal("0.5"), 0.5)],
)
def test_parse_quantity(value: object, expected: float) -> None:
    assert parse_quantity(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, True, "abc", "", -1, "nan", "sNaN", Decimal("sNaN"), float("inf")],
)
def test_parse_quantity_rejects_invalid_values(value: object) -> None:
    with pytest.raises(QuantityParseError):
        parse_quantity(value)


def test_apply_updates_quantity_and_logs_usage() -> None:
    item = make_item(1, "chicken breast", 3, category="protein", weight_equivalent=18)
    executor, inventory, usage = _setup(item)

    outcome = executor.apply(
        USER_ID, ConsumedIngredient("chicken", 6, "oz"), _match(item)
    )

    assert outcome.success
    assert outcome.previous_quantity == 3
    assert outcome.deducted == 1
    assert outcome.new_quantity == 2
    assert not outcome.item_deleted
    assert outcome.match_method == "contains"
    assert inventory.updates == [(1, 2)]
    assert inventory.deletions == []
    assert len(usage.entries) == 1
    entry = usage.entries[0]
    assert entry.item_id == 1
    assert entry.amount_used == 1
    assert entry.usage_type == "meal"
    assert entry.notes == "Meal deduction: chicken -> chicken breast"


def test_apply_deletes_depleted_item() -> None:
    item = make_item(1, "Avocado", "1")
    executor, inventory, usage = _setup(item)

    outcome = executor.apply(
        USER_ID, ConsumedIngredient("avocado", 1, "pieces"), _match(item)
    )

    assert outcome.success
    assert outcome.item_deleted
    assert outcome.new_quantity == 0
    assert inventory.deletions == [1]
    assert inventory.updates == []
    assert inventory.get(1).deleted_at is not None
    assert len(usage.entries) == 1


def test_apply_clamps_to_available_quantity() -> None:
    item = make_item(1, "Eggs", 2)
    executor, inventory, _ = _setup(item)

    outcome = executor.apply(
        USER_ID, ConsumedIngredient("eggs", 5, "pieces"), _match(item)
    )

    assert outcome.success
    assert outcome.deducted == 2
    assert outcome.note == INSUFFICIENT_QUANTITY_NOTE
    assert inventory.deletions == [1]


def test_apply_avoids_float_residue() -> None:
    item = make_item(1, "Milk", 0.3, unit="cup")
    executor, inventory, _ = _setup(item)

    outcome = executor.apply(
        USER_ID, ConsumedIngredient("milk", 0.1, "cup"), _match(item)
    )

    assert outcome.new_quantity == 0.2
    assert inventory.updates == [(1, 0.2)]


def test_apply_reports_write_failure_and_still_logs_usage() -> None:
    item = make_item(7, "Spinach", 2)
    executor, inventory, usage = _setup(item)
    inventory.failing_ids.add(7)

    outcome = executor.apply(
        USER_ID, ConsumedIngredient("spinach", 1, "pieces"), _match(item)
    )

    assert not outcome.success
    assert outcome.reason == DEDUCTION_FAILED_REASON
    assert outcome.error == "write rejected for 7"
    assert outcome.item_id == 7
    assert inventory.updates == []
    assert len(usage.entries) == 1
    entry = usage.entries[0]
    assert entry.item_id == 7
    assert entry.amount_used == 1
    assert entry.notes == "Meal deduction: spinach -> Spinach (inventory update failed)"


def test_apply_write_failure_survives_usage_log_outage() -> None:
    item = make_item(7, "Spinach", 2)
    executor, inventory, usage = _setup(item)
    inventory.failing_ids.add(7)
    usage.fail = True

    outcome = executor.apply(
        USER_ID, ConsumedIngredient("spinach", 1, "pieces"), _match(item)
    )

    assert not outcome.success
    assert outcome.reason == DEDUCTION_FAILED_REASON


def test_apply_reports_unreadable_quantity() -> None:
    item = make_item(1, "Butter", "a lot")
    executor, inventory, _ = _setup(item)

    outcome = executor.apply(
        USER_ID, ConsumedIngredient("butter", 1, "tbsp"), _match(item)
    )

    assert not outcome.success
    assert outcome.reason == DEDUCTION_FAILED_REASON
    assert inventory.updates == []


def test_apply_reports_signaling_nan_quantity() -> None:
    item = make_item(1, "Butter", "sNaN")
    executor, inventory, usage = _setup(item)

    outcome = executor.apply(
        USER_ID, ConsumedIngredient("butter", 1, "tbsp"), _match(item)
    )

    assert not outcome.success
    assert outcome.reason == DEDUCTION_FAILED_REASON
    assert inventory.updates == []
    assert inventory.deletions == []
    assert usage.entries == []


def test_usage_log_failure_does_not_block_deduction() -> None:
    item = make_item(1, "Apples", 4, category="fruit")
    executor, inventory, usage = _setup(item)
    usage.fail = True

    outcome = executor.apply(
        USER_ID, ConsumedIngredient("apple", 1, "pieces"), _match(item)
    )

    assert outcome.success
    assert inventory.updates == [(1, 3)]
