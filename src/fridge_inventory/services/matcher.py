"""Hierarchical matching of consumed ingredient names against inventory."""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import TYPE_CHECKING
from uuid import UUID

from fridge_inventory.domain.errors import PreferenceStoreError
from fridge_inventory.domain.inventory import (
    ConsumedIngredient,
    FoodCategory,
    InventoryItem,
)
from fridge_inventory.domain.matching import MAX_CONFIDENCE, MatchMethod, MatchResult
from fridge_inventory.services.normalizer import (
    extract_food_tokens,
    name_words,
    normalize_name,
)

if TYPE_CHECKING:
    from fridge_inventory.services.preferences import PreferenceService

_logger = logging.getLogger(__name__)

EXACT_SCORE = 100
INVENTORY_CONTAINS_SCORE = 90
INGREDIENT_CONTAINS_SCORE = 85
NORMALIZED_SCORE = 80
SEMANTIC_SCORE = 75
TOKEN_OVERLAP_BASE = 60
TOKEN_OVERLAP_SPAN = 10
CATEGORY_FALLBACK_SCORE = 40
DEFAULT_MATCH_THRESHOLD = 50

DEFAULT_SEMANTIC_TABLE: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "chicken": (
            "chicken",
            "poultry",
            "hen",
            "drumstick",
            "rotisserie chicken",
        ),
        "beef": (
            "beef",
            "steak",
            "ribeye",
            "sirloin",
            "brisket",
            "tenderloin",
            "flank",
            "chuck",
            "hamburger",
            "burger",
            "veal",
        ),
        "pork": (
            "pork",
            "bacon",
            "ham",
            "sausage",
            "prosciutto",
            "pancetta",
            "chorizo",
        ),
        "turkey": ("turkey",),
        "lamb": ("lamb", "mutton"),
        "fish": (
            "fish",
            "salmon",
            "tuna",
            "cod",
            "tilapia",
            "halibut",
            "trout",
            "mackerel",
            "sardine",
        ),
        "shellfish": ("shellfish", "shrimp", "prawn", "crab", "lobster", "scallop"),
        "egg": ("egg", "omelet", "omelette", "egg white", "egg yolk"),
        "milk": ("milk", "whole milk", "skim milk"),
        "cheese": (
            "cheese",
            "cheddar",
            "mozzarella",
            "parmesan",
            "feta",
            "gouda",
            "ricotta",
        ),
        "yogurt": ("yogurt", "yoghurt"),
        "butter": ("butter", "ghee"),
        "rice": ("rice", "basmati", "jasmine rice", "risotto"),
        "pasta": (
            "pasta",
            "spaghetti",
            "penne",
            "macaroni",
            "noodle",
            "fettuccine",
            "linguine",
        ),
        "bread": ("bread", "toast", "baguette", "sourdough"),
        "potato": ("potato", "spud", "fries", "hash brown"),
        "onion": ("onion", "shallot", "scallion", "green onion"),
        "tomato": ("tomato", "cherry tomato"),
        "leafy greens": ("lettuce", "spinach", "kale", "arugula", "romaine"),
        "beans": ("bean", "chickpea", "lentil", "black bean", "kidney bean"),
        "berries": ("berry", "strawberry", "blueberry", "raspberry", "blackberry"),
    }
)


@dataclass(frozen=True)
class SemanticMap:
    """Immutable table of canonical ingredients and their variant names."""

    buckets: Mapping[str, frozenset[str]]

    @classmethod
    def from_table(cls, table: Mapping[str, Iterable[str]]) -> "SemanticMap":
        """Build a map whose variants are stored as singular word phrases."""
        buckets = {
            canonical: frozenset(
                " ".join(name_words(variant)) for variant in (canonical, *variants)
            )
            for canonical, variants in table.items()
        }
        return cls(buckets=MappingProxyType(buckets))

    def buckets_for(self, name: str) -> frozenset[str]:
        """Return every canonical ingredient the name belongs to."""
        padded = f" {' '.join(name_words(name))} "
        return frozenset(
            canonical
            for canonical, variants in self.buckets.items()
            if any(f" {variant} " in padded for variant in variants if variant)
        )


@dataclass(frozen=True)
class _Probe:
    """Precomputed forms of the consumed ingredient name."""

    name: str
    normalized: str
    buckets: frozenset[str]
    tokens: frozenset[str]


@dataclass
class IngredientMatcher:
    """Chooses the best inventory item for a consumed ingredient.

    Tiers, highest first: user preference, exact, containment, normalized,
    semantic, token overlap and category fallback. Preference and exact matches
    return immediately; every other tier is scored across the whole inventory
    and the highest score wins, ties going to the earlier item.
    """

    preference_service: "PreferenceService | None" = None
    semantic_map: SemanticMap = field(
        default_factory=lambda: SemanticMap.from_table(DEFAULT_SEMANTIC_TABLE)
    )
    match_threshold: int = DEFAULT_MATCH_THRESHOLD

    def match(
        self,
        user_id: UUID,
        ingredient: ConsumedIngredient,
        inventory: list[InventoryItem],
    ) -> MatchResult | None:
        """Return the best match above the threshold, or None."""
        name = ingredient.name.strip().lower()
        if not name or not inventory:
            return None

        preferred = self._match_preference(user_id, name, inventory)
        if preferred is not None:
            return preferred

        probe = _Probe(
            name=name,
            normalized=normalize_name(name),
            buckets=self.semantic_map.buckets_for(name),
            tokens=frozenset(extract_food_tokens(name)),
        )
        best: MatchResult | None = None
        for item in inventory:
            candidate = self._score(probe, item)
            if candidate is None:
                continue
            if candidate.method is MatchMethod.EXACT:
                return candidate
            if best is None or candidate.confidence > best.confidence:
                best = candidate

        weak = best is None or best.confidence < TOKEN_OVERLAP_BASE
        if weak and ingredient.category:
            fallback = _category_fallback(ingredient.category, inventory)
            if fallback is not None and (
                best is None or fallback.confidence > best.confidence
            ):
                best = fallback

        if best is None or best.confidence < self.match_threshold:
            _logger.debug(
                "No inventory match for %s (best=%s)",
                name,
                best.confidence if best else None,
            )
            return None
        return best

    def _match_preference(
        self, user_id: UUID, scanned_name: str, inventory: list[InventoryItem]
    ) -> MatchResult | None:
        if self.preference_service is None:
            return None
        try:
            preferences = self.preference_service.find_preferences(
                user_id, scanned_name
            )
        except PreferenceStoreError as exc:
            _logger.warning(
                "Preference lookup unavailable for %s, using generic matching: %s",
                scanned_name,
                exc,
            )
            return None
        for preference in preferences:
            target = preference.matched_item_name.strip().lower()
            for item in inventory:
                if item.name.strip().lower() == target:
                    return MatchResult(
                        item=item,
                        confidence=min(preference.confidence_score, MAX_CONFIDENCE),
                        method=MatchMethod.USER_PREFERENCE,
                    )
        return None

    def _score(self, probe: _Probe, item: InventoryItem) -> MatchResult | None:
        item_name = item.name.strip().lower()
        if not item_name:
            return None
        if item_name == probe.name:
            return MatchResult(item, EXACT_SCORE, MatchMethod.EXACT)
        if probe.name in item_name:
            return MatchResult(item, INVENTORY_CONTAINS_SCORE, MatchMethod.CONTAINS)
        if item_name in probe.name:
            return MatchResult(item, INGREDIENT_CONTAINS_SCORE, MatchMethod.CONTAINS)
        if normalize_name(item_name) == probe.normalized:
            return MatchResult(item, NORMALIZED_SCORE, MatchMethod.NORMALIZED)
        if probe.buckets & self.semantic_map.buckets_for(item_name):
            return MatchResult(item, SEMANTIC_SCORE, MatchMethod.SEMANTIC)
        item_tokens = frozenset(extract_food_tokens(item_name))
        score = token_overlap_score(probe.tokens, item_tokens)
        if score is not None:
            return MatchResult(item, score, MatchMethod.TOKEN_OVERLAP)
        return None


def token_overlap_score(left: frozenset[str], right: frozenset[str]) -> int | None:
    """Score shared food tokens between 60 and 70, or None without overlap."""
    overlap = len(left & right)
    if overlap == 0:
        return None
    ratio = overlap / max(len(left), len(right))
    return math.floor(TOKEN_OVERLAP_BASE + TOKEN_OVERLAP_SPAN * ratio + 0.5)


def _category_fallback(hint: str, inventory: list[InventoryItem]) -> MatchResult | None:
    candidates = [item for item in inventory if _same_category(hint, item.category)]
    if not candidates:
        return None
    soonest = min(
        candidates,
        key=lambda item: (
            item.expiration_date is None,
            item.expiration_date or date.max,
        ),
    )
    return MatchResult(soonest, CATEGORY_FALLBACK_SCORE, MatchMethod.CATEGORY_FALLBACK)


def _same_category(hint: str, stored: str | None) -> bool:
    if not stored:
        return False
    hinted = FoodCategory.parse(hint)
    actual = FoodCategory.parse(stored)
    if hinted is not FoodCategory.OTHER and actual is not FoodCategory.OTHER:
        return hinted is actual
    return hint.strip().lower() == stored.strip().lower()
