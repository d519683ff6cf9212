"""Tests for learned ingredient preferences."""

from datetime import UTC, datetime

from fridge_inventory.domain.matching import MatchMethod, MatchResult
from fridge_inventory.services.preferences import PreferenceService
from tests.conftest import USER_ID, InMemoryPreferenceRepository, make_item


def _match(name: str, confidence: int) -> MatchResult:
    return MatchResult(
        item=make_item(1, name, 2), confidence=confidence, method=MatchMethod.CONTAINS
    )


def test_record_match_creates_preference() -> None:
    repository = InMemoryPreferenceRepository()
    service = PreferenceService(repository)

    preference = service.record_match(
        USER_ID, "  Chicken ", _match("Chicken Breast", 90)
    )

    assert preference.scanned_name == "chicken"
    assert preference.matched_item_name == "Chicken Breast"
    assert preference.confidence_score == 90
    assert preference.match_count == 1
    assert len(repository.preferences) == 1


def test_record_match_reinforces_existing_preference() -> None:
    repository = InMemoryPreferenceRepository()
    service = PreferenceService(repository)
    service.record_match(USER_ID, "chicken", _match("Chicken Breast", 90))

    preference = service.record_match(USER_ID, "Chicken", _match("Chicken Breast", 90))

    assert preference.confidence_score == 95
    assert preference.match_count == 2
    stored = repository.preferences[preference.id]
    assert stored.confidence_score == 95
    assert stored.match_count == 2


def test_record_match_caps_confidence() -> None:
    repository = InMemoryPreferenceRepository()
    service = PreferenceService(repository, confidence_step=10)
    service.record_match(USER_ID, "milk", _match("Whole Milk", 95))

    preference = service.record_match(USER_ID, "milk", _match("Whole Milk", 95))

    assert preference.confidence_score == 100


def test_find_preferences_orders_by_confidence_then_count() -> None:
    repository = InMemoryPreferenceRepository()
    used_at = datetime(2026, 10, 1, tzinfo=UTC)
    low = repository.create_preference(USER_ID, "cheese", "Feta", 70, used_at)
    high = repository.create_preference(USER_ID, "cheese", "Cheddar", 90, used_at)
    tied = repository.create_preference(USER_ID, "cheese", "Gouda", 90, used_at)
    repository.update_preference(tied.id, 90, 4, used_at)

    preferences = PreferenceService(repository).find_preferences(USER_ID, "Cheese")

    assert [preference.id for preference in preferences] == [tied.id, high.id, low.id]
