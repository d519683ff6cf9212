"""Unit conversion for inventory deductions."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from fridge_inventory.domain.inventory import FoodCategory

COUNT_UNIT = "pieces"

_UNIT_ALIASES = {
    "ounce": "oz",
    "ounces": "oz",
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
    "gram": "g",
    "grams": "g",
    "gr": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kilo": "kg",
    "kilos": "kg",
    "milligram": "mg",
    "milligrams": "mg",
    "cups": "cup",
    "c": "cup",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbs": "tbsp",
    "tb": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "t": "tsp",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "fl oz": "floz",
    "fluid ounce": "floz",
    "fluid ounces": "floz",
    "piece": COUNT_UNIT,
    "pc": COUNT_UNIT,
    "pcs": COUNT_UNIT,
    "count": COUNT_UNIT,
    "ct": COUNT_UNIT,
    "each": COUNT_UNIT,
    "ea": COUNT_UNIT,
    "whole": COUNT_UNIT,
    "item": COUNT_UNIT,
    "items": COUNT_UNIT,
    "unit": COUNT_UNIT,
    "units": COUNT_UNIT,
}

OUNCES_PER_WEIGHT_UNIT: Mapping[str, float] = MappingProxyType(
    {
        "oz": 1.0,
        "lb": 16.0,
        "g": 1 / 28.3495,
        "kg": 35.274,
        "mg": 1 / 28349.5,
    }
)

# Factors from the key unit to each nested unit; inverse lookups are derived.
_FACTOR_TABLE: dict[str, dict[str, float]] = {
    "cup": {"oz": 8, "ml": 237, "tbsp": 16, "tsp": 48},
    "oz": {"cup": 0.125, "ml": 29.57, "g": 28.35},
    "tbsp": {"tsp": 3, "ml": 15, "cup": 0.0625},
    "lb": {"oz": 16, "g": 453.6, "kg": 0.4536},
    "kg": {"g": 1000, "lb": 2.205, "oz": 35.27},
    "l": {"ml": 1000, "cup": 4.227},
    "floz": {"ml": 29.57, "cup": 0.125, "tbsp": 2},
}
CONVERSION_FACTORS: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {unit: MappingProxyType(factors) for unit, factors in _FACTOR_TABLE.items()}
)

DEFAULT_OUNCES_PER_PIECE: Mapping[FoodCategory, float] = MappingProxyType(
    {
        FoodCategory.PROTEIN: 6.0,
        FoodCategory.VEGETABLE: 8.0,
        FoodCategory.FRUIT: 6.0,
        FoodCategory.GRAIN: 4.0,
        FoodCategory.DAIRY: 8.0,
    }
)

_PRECISION = 6


def normalize_unit(raw: str | None) -> str:
    """Return the canonical spelling of a unit, or an empty string."""
    if not raw:
        return ""
    cleaned = " ".join(raw.lower().split()).rstrip(".")
    return _UNIT_ALIASES.get(cleaned, cleaned)


def is_count_unit(unit: str) -> bool:
    return unit in {"", COUNT_UNIT}


class ConversionMethod(Enum):
    """Rule used to compute a deduction amount."""

    WEIGHT_EQUIVALENT = "weight_equivalent"
    SMART_DEFAULT = "smart_default"
    DIRECT = "direct"
    TABLE = "table"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class UnitConversion:
    """Amount to subtract, expressed in the inventory item's unit."""

    amount: float
    requested: float
    method: ConversionMethod

    @property
    def clamped(self) -> bool:
        """True when less than the requested amount was available."""
        return round(self.requested - self.amount, _PRECISION) > 0


@dataclass(frozen=True)
class UnitConverter:
    """Computes how much inventory quantity a consumed amount uses up."""

    ounces_per_piece: Mapping[FoodCategory, float] = field(
        default_factory=lambda: DEFAULT_OUNCES_PER_PIECE
    )
    conversion_factors: Mapping[str, Mapping[str, float]] = field(
        default_factory=lambda: CONVERSION_FACTORS
    )

    def compute(  # noqa: PLR0913
        self,
        required_quantity: float,
        required_unit: str | None,
        available_quantity: float,
        available_unit: str | None,
        weight_equivalent: float | None = None,
        category: str | None = None,
    ) -> UnitConversion:
        """Return the quantity to subtract, always within [0, available]."""
        required = max(float(required_quantity), 0.0)
        available = max(float(available_quantity), 0.0)
        required_unit = normalize_unit(required_unit)
        available_unit = normalize_unit(available_unit)
        required_ounces = _to_ounces(required, required_unit)
        available_is_weight = available_unit in OUNCES_PER_WEIGHT_UNIT

        if (
            required_ounces is not None
            and weight_equivalent
            and weight_equivalent > 0
            and available > 0
            and not available_is_weight
        ):
            ounces_per_unit = weight_equivalent / available
            pieces = _ceil(required_ounces / ounces_per_unit)
            return _clamp(pieces, available, ConversionMethod.WEIGHT_EQUIVALENT)

        if required_ounces is not None and is_count_unit(available_unit):
            default = self._ounces_per_piece(category)
            pieces = _ceil(required_ounces / default)
            return _clamp(pieces, available, ConversionMethod.SMART_DEFAULT)

        if required_unit == available_unit or not required_unit or not available_unit:
            return _clamp(required, available, ConversionMethod.DIRECT)

        factor = self._factor(required_unit, available_unit)
        if factor is not None:
            return _clamp(required * factor, available, ConversionMethod.TABLE)

        return UnitConversion(
            amount=1.0 if available >= 1 else 0.0,
            requested=1.0,
            method=ConversionMethod.FALLBACK,
        )

    def _ounces_per_piece(self, category: str | None) -> float:
        parsed = FoodCategory.parse(category)
        if parsed in self.ounces_per_piece:
            return self.ounces_per_piece[parsed]
        return self.ounces_per_piece[FoodCategory.PROTEIN]

    def _factor(self, source: str, target: str) -> float | None:
        direct = self.conversion_factors.get(source, {}).get(target)
        if direct:
            return float(direct)
        inverse = self.conversion_factors.get(target, {}).get(source)
        if inverse:
            return 1 / float(inverse)
        return None


def _to_ounces(quantity: float, unit: str) -> float | None:
    factor = OUNCES_PER_WEIGHT_UNIT.get(unit)
    if factor is None:
        return None
    return quantity * factor


def _ceil(value: float) -> float:
    return float(math.ceil(round(value, _PRECISION)))


def _clamp(
    requested: float, available: float, method: ConversionMethod
) -> UnitConversion:
    return UnitConversion(
        amount=min(max(requested, 0.0), available),
        requested=requested,
        method=method,
    )
