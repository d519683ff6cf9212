"""Supabase repository for fridge items."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from fridge_inventory.adapters.supabase_errors import SUPABASE_ERRORS
from fridge_inventory.domain.errors import InventoryReadError, InventoryWriteError
from fridge_inventory.domain.inventory import InventoryItem
from fridge_inventory.services.deductions import InventoryRepository

USED_UP_REASON = "used_up"


@dataclass
class SupabaseInventoryRepository(InventoryRepository):
    """Supabase-backed repository for the ``fridge_items`` table."""

    client: Client

    def list_active_items(self, user_id: UUID) -> list[InventoryItem]:
        """Return items without a soft-delete marker, soonest expiry first."""
        try:
            response = (
                self.client.table("fridge_items")
                .select("*")
                .eq("user_id", str(user_id))
                .is_("deleted_at", "null")
                .order("expiration_date")
                .execute()
            )
        except SUPABASE_ERRORS as exc:
            raise InventoryReadError(f"Failed to load inventory: {exc}") from exc
        return [_parse_item(row) for row in response.data or []]

    def update_quantity(
        self, item_id: int | str, quantity: float, updated_at: datetime
    ) -> None:
        """Set the stored quantity of an item."""
        self._update(
            item_id,
            {"quantity": quantity, "updated_at": updated_at.isoformat()},
        )

    def delete_item(self, item_id: int | str, deleted_at: datetime) -> None:
        """Soft-delete an item that has been used up."""
        self._update(
            item_id,
            {
                "deleted_at": deleted_at.isoformat(),
                "delete_reason": USED_UP_REASON,
                "updated_at": deleted_at.isoformat(),
            },
        )

    def _update(self, item_id: int | str, payload: dict[str, object]) -> None:
        try:
            response = (
                self.client.table("fridge_items")
                .update(payload)
                .eq("id", item_id)
                .is_("deleted_at", "null")
                .execute()
            )
        except SUPABASE_ERRORS as exc:
            raise InventoryWriteError(
                f"Failed to update inventory item {item_id}: {exc}"
            ) from exc
        if not response.data:
            raise InventoryWriteError(f"Inventory item {item_id} not found")


def _parse_item(row: dict[str, object]) -> InventoryItem:
    """Parse a fridge item row into a domain model."""
    return InventoryItem(
        id=row["id"],
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("item_name") or ""),
        category=row.get("category"),
        quantity=row.get("quantity"),
        unit=row.get("unit"),
        weight_equivalent=_optional_float(row.get("weight_equivalent")),
        expiration_date=_parse_date(row.get("expiration_date")),
        deleted_at=_parse_datetime(row.get("deleted_at")),
    )


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str) and value:
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _parse_date(value: object) -> date | None:
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    return None


def _parse_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
