"""Inventory usage log and consumption summaries."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from fridge_inventory.domain.meals import ConsumptionSummary, UsageLogEntry

MEAL_USAGE = "meal"
DEFAULT_UNIT_LABEL = "units"


class UsageLogRepository(Protocol):
    """Persistence interface for the append-only usage log."""

    def append_usage(self, entry: UsageLogEntry) -> None:
        """Append a usage entry."""

    def list_usage(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[UsageLogEntry]:
        """Return usage entries recorded within a time range."""


@dataclass
class UsageService:
    """Summarizes what meals consumed from the fridge."""

    repository: UsageLogRepository

    def summarize(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> ConsumptionSummary:
        """Total meal usage between start (inclusive) and end (exclusive)."""
        entries = [
            entry
            for entry in self.repository.list_usage(user_id, start, end)
            if entry.usage_type == MEAL_USAGE and start <= entry.used_at < end
        ]
        totals: dict[str, float] = {}
        for entry in entries:
            unit = entry.unit or DEFAULT_UNIT_LABEL
            totals[unit] = totals.get(unit, 0.0) + entry.amount_used
        return ConsumptionSummary(
            start=start,
            end=end,
            entry_count=len(entries),
            items_touched=len({entry.item_id for entry in entries}),
            totals_by_unit=totals,
        )

    def summarize_recent(self, user_id: UUID, days: int = 7) -> ConsumptionSummary:
        """Summarize usage over the trailing number of days."""
        end = datetime.now(tz=UTC)
        return self.summarize(user_id, end - timedelta(days=days), end)
