"""Allergy, pregnancy and medication veto checks."""

from dataclasses import dataclass, field
from typing import Protocol

from food_guard.domain.foods import (
    EvaluationContext,
    FoodRecord,
    UserProfile,
    normalize_text,
)
from food_guard.domain.risks import AlertType, Risk, Severity
from food_guard.domain.thresholds import ThresholdTable

ALLERGY_MARKER = "allergy"
PREGNANCY = "pregnancy"


class MedicationVetoSource(Protocol):
    """Source of hard medication-food vetoes beyond the interaction table."""

    async def vetoes(self, food: FoodRecord, medications: tuple[str, ...]) -> list[Risk]:
        """Return veto risks for the food and medication list."""


class NoMedicationVetoes:
    """Veto source that never vetoes."""

    async def vetoes(self, food: FoodRecord, medications: tuple[str, ...]) -> list[Risk]:
        return []


def allergen_from_condition(condition: str) -> str | None:
    """Derive an allergen phrase from a tag such as ``tree_nut_allergy``."""
    if ALLERGY_MARKER not in condition:
        return None
    allergen = condition.replace(f"_{ALLERGY_MARKER}", "").replace("_", " ").strip()
    return allergen or None


def contains_phrase(text: str, phrase: str) -> bool:
    """Match a phrase in normalized text, ignoring spacing differences."""
    if not text or not phrase:
        return False
    if phrase in text:
        return True
    return phrase.replace(" ", "") in text.replace(" ", "")


@dataclass
class ImmediateRiskDetector:
    """Detects risks that make a food unsafe regardless of amount."""

    thresholds: ThresholdTable
    veto_source: MedicationVetoSource = field(default_factory=NoMedicationVetoes)
    name: str = "immediate"

    async def detect(
        self, food: FoodRecord, profile: UserProfile, context: EvaluationContext
    ) -> list[Risk]:
        """Return allergy, pregnancy and medication veto risks."""
        risks = self._allergy_risks(food, profile)
        risks.extend(self._pregnancy_risks(food, profile))
        if profile.medications:
            risks.extend(await self.veto_source.vetoes(food, profile.medications))
        return risks

    def _allergy_risks(self, food: FoodRecord, profile: UserProfile) -> list[Risk]:
        name = normalize_text(food.name)
        ingredients = normalize_text(food.ingredients)
        risks: list[Risk] = []
        for condition in profile.health_conditions:
            allergen = allergen_from_condition(condition)
            if allergen is None:
                continue
            if contains_phrase(name, allergen) or contains_phrase(ingredients, allergen):
                risks.append(
                    Risk(
                        type=AlertType.ALLERGY_ALERT,
                        severity=Severity.CRITICAL,
                        message=f"ALLERGY ALERT: This contains {allergen}! Do not consume.",
                        action="Find an alternative immediately",
                        condition=condition,
                        allergen=allergen,
                    )
                )
        return risks

    def _pregnancy_risks(self, food: FoodRecord, profile: UserProfile) -> list[Risk]:
        if not profile.has_condition(PREGNANCY):
            return []
        name = normalize_text(food.name)
        return [
            Risk(
                type=AlertType.IMMEDIATE_DANGER,
                severity=Severity.CRITICAL,
                message=f"PREGNANCY WARNING: {food.name} is not safe during pregnancy!",
                action="Choose a pregnancy-safe alternative",
                condition=PREGNANCY,
                details={
                    "banned_food": banned,
                    "reason": "May cause foodborne illness or developmental issues",
                },
            )
            for banned in self.thresholds.banned_foods(PREGNANCY)
            if banned in name
        ]
