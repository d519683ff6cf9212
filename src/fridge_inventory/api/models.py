"""Pydantic models for meal logging requests."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from fridge_inventory.domain.inventory import ConsumedIngredient
from fridge_inventory.domain.meals import MealContext, MealType


class ConsumedIngredientPayload(BaseModel):
    """One ingredient eaten in a meal."""

    name: str = Field(min_length=1)
    quantity: float = Field(default=1, ge=0)
    unit: str | None = None
    category: str | None = None

    def to_ingredient(self) -> ConsumedIngredient:
        return ConsumedIngredient(
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            category=self.category,
        )


class MealLogRequest(BaseModel):
    """Meal logging payload."""

    ingredients: list[ConsumedIngredientPayload] = Field(min_length=1)
    image_url: str | None = Field(default=None, alias="imageUrl")
    meal_type: MealType | None = Field(default=None, alias="mealType")
    target_date: datetime | None = Field(default=None, alias="targetDate")
    meal_name: str | None = Field(default=None, alias="mealName")

    model_config = ConfigDict(populate_by_name=True)

    def to_ingredients(self) -> list[ConsumedIngredient]:
        return [payload.to_ingredient() for payload in self.ingredients]

    def to_context(self) -> MealContext:
        """Build batch metadata; naive target dates are read as UTC."""
        logged_at = self.target_date or datetime.now(tz=UTC)
        if logged_at.tzinfo is None:
            logged_at = logged_at.replace(tzinfo=UTC)
        return MealContext(
            logged_at=logged_at,
            image_url=self.image_url,
            meal_type=self.meal_type,
            meal_name=self.meal_name,
        )
