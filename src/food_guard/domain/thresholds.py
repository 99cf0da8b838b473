"""Immutable threshold, interaction and pattern policy tables."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class NutrientLimits:
    """Per-nutrient limits. ``daily`` is absent for condition overrides."""

    meal: float
    critical: float
    daily: float | None = None


@dataclass(frozen=True)
class ConditionRule:
    """Overrides and food lists for one health condition."""

    thresholds: Mapping[str, NutrientLimits] = field(
        default_factory=lambda: MappingProxyType({})
    )
    banned_foods: tuple[str, ...] = ()


@dataclass(frozen=True)
class CalorieLimits:
    """Calorie limits for one meal and for the day."""

    binge: float = 1000
    day_excess: float = 500


@dataclass(frozen=True)
class ThresholdTable:
    """Generic nutrient limits plus per-condition overrides."""

    nutrients: Mapping[str, NutrientLimits]
    conditions: Mapping[str, ConditionRule]
    calories: CalorieLimits = CalorieLimits()

    @classmethod
    def default(cls) -> "ThresholdTable":
        """Return the stock threshold table."""
        return cls(
            nutrients=MappingProxyType(
                {
                    "sodium": NutrientLimits(daily=2300, meal=800, critical=1500),
                    "sugar": NutrientLimits(daily=50, meal=15, critical=25),
                    "saturated_fat": NutrientLimits(daily=20, meal=7, critical=12),
                }
            ),
            conditions=MappingProxyType(
                {
                    "diabetes": ConditionRule(
                        thresholds=MappingProxyType(
                            {
                                "sugar": NutrientLimits(meal=10, critical=15),
                                "carbs": NutrientLimits(meal=30, critical=45),
                            }
                        ),
                    ),
                    "hypertension": ConditionRule(
                        thresholds=MappingProxyType(
                            {"sodium": NutrientLimits(meal=500, critical=800)}
                        ),
                    ),
                    "heart_disease": ConditionRule(
                        thresholds=MappingProxyType(
                            {
                                "saturated_fat": NutrientLimits(meal=5, critical=8),
                                "cholesterol": NutrientLimits(meal=100, critical=200),
                            }
                        ),
                    ),
                    "pregnancy": ConditionRule(
                        banned_foods=("sushi", "raw fish", "soft cheese", "raw eggs"),
                    ),
                    "kidney_disease": ConditionRule(
                        thresholds=MappingProxyType(
                            {"protein": NutrientLimits(meal=20, critical=30)}
                        ),
                    ),
                }
            ),
        )

    def limits_for(self, nutrient: str, condition: str | None = None) -> NutrientLimits | None:
        """Return limits for a nutrient, preferring the condition override."""
        if condition is not None:
            rule = self.conditions.get(condition)
            if rule is not None and nutrient in rule.thresholds:
                return rule.thresholds[nutrient]
        return self.nutrients.get(nutrient)

    def banned_foods(self, condition: str) -> tuple[str, ...]:
        """Return the banned food list for a condition."""
        rule = self.conditions.get(condition)
        return rule.banned_foods if rule else ()


@dataclass(frozen=True)
class DrugInteraction:
    """Foods that interfere with one medication."""

    foods: tuple[str, ...]
    risk: str
    nutrient: str | None = None
    timing: str | None = None


@dataclass(frozen=True)
class InteractionTable:
    """Static food-drug interaction lookup keyed by lowercased medication."""

    medications: Mapping[str, DrugInteraction]

    @classmethod
    def default(cls) -> "InteractionTable":
        """Return the stock interaction table."""
        return cls(
            medications=MappingProxyType(
                {
                    "warfarin": DrugInteraction(
                        foods=("leafy greens", "broccoli", "brussels sprouts"),
                        nutrient="vitamin K",
                        risk="Can reduce medication effectiveness",
                    ),
                    "statins": DrugInteraction(
                        foods=("grapefruit", "pomegranate"),
                        risk="Can increase medication side effects",
                    ),
                    "maoi": DrugInteraction(
                        foods=("aged cheese", "cured meats", "fermented foods"),
                        risk="Can cause dangerous blood pressure spike",
                    ),
                    "thyroid": DrugInteraction(
                        foods=("soy", "coffee", "high-fiber foods"),
                        timing="within 4 hours",
                        risk="Can reduce medication absorption",
                    ),
                }
            )
        )

    def lookup(self, medication: str) -> DrugInteraction | None:
        """Return the interaction entry for a medication name."""
        return self.medications.get(medication.strip().lower())


@dataclass(frozen=True)
class PatternPolicy:
    """Tunable limits for historical pattern rules."""

    recent_days: int = 7
    repetition_min_count: int = 3
    unhealthy_score_below: float = 50
    late_night_hour: int = 21
    late_night_calories: float = 300
    binge_gap_minutes: float = 60
    binge_calories: float = 400
    history_timeout_seconds: float = 3.0
