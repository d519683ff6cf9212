"""FastAPI application factory."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from fridge_inventory.api.models import MealLogRequest
from fridge_inventory.app_logging import configure_logging
from fridge_inventory.containers import AppContainer
from fridge_inventory.domain.errors import InventoryReadError, TransactionLogError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/users/{user_id}/meals/log", response_model=None)
    def log_meal(
        user_id: UUID, payload: MealLogRequest, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Deduct a meal's ingredients from the user's fridge."""
        state_container: AppContainer = request.app.state.container
        try:
            report = state_container.meal_log_service.deduct(
                user_id, payload.to_ingredients(), payload.to_context()
            )
        except (InventoryReadError, TransactionLogError) as exc:
            logger.exception("Meal logging failed for user %s", user_id)
            return JSONResponse(
                status_code=500, content={"success": False, "error": str(exc)}
            )
        deducted = len(report.deducted)
        return {
            "success": True,
            "results": report.as_dict(),
            "message": f"Successfully logged meal with {deducted} items deducted",
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    @app.get("/users/{user_id}/usage")
    def usage_summary(
        user_id: UUID, request: Request, days: int = Query(default=7, ge=1, le=365)
    ) -> dict[str, object]:
        """Return meal consumption totals for the trailing days."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.usage_service.summarize_recent(user_id, days=days)
        return {
            "start": summary.start.isoformat(),
            "end": summary.end.isoformat(),
            "entries": summary.entry_count,
            "itemsTouched": summary.items_touched,
            "totalsByUnit": summary.totals_by_unit,
        }

    return app
