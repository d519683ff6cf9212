"""Supabase repository for the inventory usage log."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fridge_inventory.adapters.supabase_errors import SUPABASE_ERRORS
from fridge_inventory.domain.errors import UsageLogError
from fridge_inventory.domain.meals import UsageLogEntry
from fridge_inventory.services.usage import UsageLogRepository


@dataclass
class SupabaseUsageRepository(UsageLogRepository):
    """Supabase-backed repository for the ``inventory_usage`` table."""

    client: Client

    def append_usage(self, entry: UsageLogEntry) -> None:
        """Insert a usage row."""
        try:
            self.client.table("inventory_usage").insert(
                {
                    "user_id": str(entry.user_id),
                    "item_id": entry.item_id,
                    "amount_used": entry.amount_used,
                    "unit": entry.unit,
                    "used_at": entry.used_at.isoformat(),
                    "usage_type": entry.usage_type,
                    "notes": entry.notes,
                }
            ).execute()
        except SUPABASE_ERRORS as exc:
            raise UsageLogError(f"Failed to log usage: {exc}") from exc

    def list_usage(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[UsageLogEntry]:
        """Return usage rows with ``used_at`` in ``[start, end)``."""
        try:
            response = (
                self.client.table("inventory_usage")
                .select(
                    "user_id, item_id, amount_used, unit, used_at, usage_type, notes"
                )
                .eq("user_id", str(user_id))
                .gte("used_at", start.isoformat())
                .lt("used_at", end.isoformat())
                .order("used_at")
                .execute()
            )
        except SUPABASE_ERRORS as exc:
            raise UsageLogError(f"Failed to load usage: {exc}") from exc
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> UsageLogEntry:
    return UsageLogEntry(
        user_id=UUID(str(row["user_id"])),
        item_id=row["item_id"],
        amount_used=float(row.get("amount_used") or 0),
        unit=row.get("unit"),
        used_at=datetime.fromisoformat(str(row["used_at"])),
        notes=row.get("notes"),
        usage_type=str(row.get("usage_type") or "meal"),
    )
