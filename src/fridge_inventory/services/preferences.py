"""Learned per-user ingredient matches."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from fridge_inventory.domain.matching import (
    MAX_CONFIDENCE,
    MatchResult,
    UserIngredientPreference,
)

DEFAULT_CONFIDENCE_STEP = 5


class PreferenceRepository(Protocol):
    """Persistence interface for user ingredient matches.

    Implementations return empty results when nothing is stored and raise
    ``PreferenceStoreError`` when the store cannot be reached.
    """

    def list_preferences(
        self, user_id: UUID, scanned_name: str
    ) -> list[UserIngredientPreference]:
        """Return stored matches for a scanned name."""

    def get_preference(
        self, user_id: UUID, scanned_name: str, matched_item_name: str
    ) -> UserIngredientPreference | None:
        """Return the stored match for a name pair, if present."""

    def create_preference(  # noqa: PLR0913
        self,
        user_id: UUID,
        scanned_name: str,
        matched_item_name: str,
        confidence_score: int,
        used_at: datetime,
    ) -> UserIngredientPreference:
        """Create a match row and return it."""

    def update_preference(
        self,
        preference_id: UUID,
        confidence_score: int,
        match_count: int,
        used_at: datetime,
    ) -> None:
        """Update confidence and usage counters for a match row."""


@dataclass
class PreferenceService:
    """Looks up and reinforces learned matches."""

    repository: PreferenceRepository
    confidence_step: int = DEFAULT_CONFIDENCE_STEP

    def find_preferences(
        self, user_id: UUID, scanned_name: str
    ) -> list[UserIngredientPreference]:
        """Return matches for a scanned name, strongest first."""
        preferences = self.repository.list_preferences(
            user_id, _scanned_key(scanned_name)
        )
        return sorted(
            preferences,
            key=lambda preference: (
                preference.confidence_score,
                preference.match_count,
            ),
            reverse=True,
        )

    def record_match(
        self, user_id: UUID, scanned_name: str, match: MatchResult
    ) -> UserIngredientPreference:
        """Create or reinforce the preference for a confirmed match."""
        key = _scanned_key(scanned_name)
        used_at = datetime.now(tz=UTC)
        existing = self.repository.get_preference(user_id, key, match.item.name)
        if existing is None:
            return self.repository.create_preference(
                user_id=user_id,
                scanned_name=key,
                matched_item_name=match.item.name,
                confidence_score=min(match.confidence, MAX_CONFIDENCE),
                used_at=used_at,
            )
        confidence = min(
            existing.confidence_score + self.confidence_step, MAX_CONFIDENCE
        )
        match_count = existing.match_count + 1
        self.repository.update_preference(
            existing.id,
            confidence_score=confidence,
            match_count=match_count,
            used_at=used_at,
        )
        return UserIngredientPreference(
            id=existing.id,
            user_id=existing.user_id,
            scanned_name=existing.scanned_name,
            matched_item_name=existing.matched_item_name,
            confidence_score=confidence,
            match_count=match_count,
            last_used=used_at,
        )


def _scanned_key(name: str) -> str:
    return name.strip().lower()
