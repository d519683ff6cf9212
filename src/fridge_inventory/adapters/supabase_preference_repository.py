"""Supabase repository for learned ingredient matches."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fridge_inventory.adapters.supabase_errors import SUPABASE_ERRORS
from fridge_inventory.domain.errors import PreferenceStoreError
from fridge_inventory.domain.matching import UserIngredientPreference
from fridge_inventory.services.preferences import PreferenceRepository

_COLUMNS = (
    "id, user_id, scanned_name, matched_item_name, confidence_score, "
    "match_count, last_used"
)


@dataclass
class SupabasePreferenceRepository(PreferenceRepository):
    """Supabase-backed repository for ``user_ingredient_matches``."""

    client: Client

    def list_preferences(
        self, user_id: UUID, scanned_name: str
    ) -> list[UserIngredientPreference]:
        """Return stored matches for a scanned name."""
        try:
            response = (
                self.client.table("user_ingredient_matches")
                .select(_COLUMNS)
                .eq("user_id", str(user_id))
                .eq("scanned_name", scanned_name)
                .order("confidence_score", desc=True)
                .execute()
            )
        except SUPABASE_ERRORS as exc:
            raise PreferenceStoreError(f"Failed to load preferences: {exc}") from exc
        return [_parse_preference(row) for row in response.data or []]

    def get_preference(
        self, user_id: UUID, scanned_name: str, matched_item_name: str
    ) -> UserIngredientPreference | None:
        """Return the stored match for a name pair, if present."""
        try:
            response = (
                self.client.table("user_ingredient_matches")
                .select(_COLUMNS)
                .eq("user_id", str(user_id))
                .eq("scanned_name", scanned_name)
                .eq("matched_item_name", matched_item_name)
                .limit(1)
                .execute()
            )
        except SUPABASE_ERRORS as exc:
            raise PreferenceStoreError(f"Failed to load preference: {exc}") from exc
        if not response.data:
            return None
        return _parse_preference(response.data[0])

    def create_preference(  # noqa: PLR0913
        self,
        user_id: UUID,
        scanned_name: str,
        matched_item_name: str,
        confidence_score: int,
        used_at: datetime,
    ) -> UserIngredientPreference:
        """Create a match row and return it."""
        try:
            response = (
                self.client.table("user_ingredient_matches")
                .insert(
                    {
                        "user_id": str(user_id),
                        "scanned_name": scanned_name,
                        "matched_item_name": matched_item_name,
                        "confidence_score": confidence_score,
                        "match_count": 1,
                        "last_used": used_at.isoformat(),
                    }
                )
                .execute()
            )
        except SUPABASE_ERRORS as exc:
            raise PreferenceStoreError(f"Failed to save preference: {exc}") from exc
        if not response.data:
            raise PreferenceStoreError("Failed to save preference")
        return _parse_preference(response.data[0])

    def update_preference(
        self,
        preference_id: UUID,
        confidence_score: int,
        match_count: int,
        used_at: datetime,
    ) -> None:
        """Update confidence and usage counters for a match row."""
        try:
            self.client.table("user_ingredient_matches").update(
                {
                    "confidence_score": confidence_score,
                    "match_count": match_count,
                    "last_used": used_at.isoformat(),
                }
            ).eq("id", str(preference_id)).execute()
        except SUPABASE_ERRORS as exc:
            raise PreferenceStoreError(f"Failed to update preference: {exc}") from exc


def _parse_preference(row: dict[str, object]) -> UserIngredientPreference:
    last_used = row.get("last_used")
    return UserIngredientPreference(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        scanned_name=str(row["scanned_name"]),
        matched_item_name=str(row["matched_item_name"]),
        confidence_score=int(row.get("confidence_score") or 0),
        match_count=int(row.get("match_count") or 0),
        last_used=datetime.fromisoformat(last_used)
        if isinstance(last_used, str)
        else None,
    )
