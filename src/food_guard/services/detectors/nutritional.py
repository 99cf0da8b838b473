"""Nutrient threshold checks, generic and per health condition."""

import math
from dataclasses import dataclass

from food_guard.domain.foods import (
    NUTRIENT_UNITS,
    EvaluationContext,
    FoodRecord,
    UserProfile,
)
from food_guard.domain.risks import AlertType, Risk, Severity
from food_guard.domain.thresholds import ThresholdTable

_GENERIC_ACTIONS = {
    "sodium": (
        "This will spike your blood pressure - find a low-sodium option",
        "Balance with low-sodium foods today",
    ),
    "sugar": (
        "This will cause a major blood sugar spike",
        "Keep the rest of today's meals low in sugar",
    ),
}
_GENERIC_LABELS = {"sodium": "EXTREME SODIUM", "sugar": "SUGAR BOMB"}


@dataclass
class NutritionalThresholdDetector:
    """Compares a food's absolute nutrient values against the threshold table."""

    thresholds: ThresholdTable
    exercise_kcal_per_minute: float = 8.0
    name: str = "nutritional"

    async def detect(
        self, food: FoodRecord, profile: UserProfile, context: EvaluationContext
    ) -> list[Risk]:
        """Return generic, calorie and condition-specific nutrient risks."""
        risks: list[Risk] = []
        for nutrient in ("sodium", "sugar"):
            risk = self._generic_risk(food, nutrient)
            if risk is not None:
                risks.append(risk)
        calorie_risk = self._calorie_risk(food)
        if calorie_risk is not None:
            risks.append(calorie_risk)
        risks.extend(self._condition_risks(food, profile))
        return risks

    def _generic_risk(self, food: FoodRecord, nutrient: str) -> Risk | None:
        limits = self.thresholds.limits_for(nutrient)
        value = food.nutrient(nutrient)
        if limits is None or value is None:
            return None
        unit = NUTRIENT_UNITS[nutrient]
        critical_action, meal_action = _GENERIC_ACTIONS[nutrient]
        if value > limits.critical:
            percent = round(value / limits.daily * 100) if limits.daily else None
            return Risk(
                type=AlertType.HIGH_RISK,
                severity=Severity.HIGH,
                message=(
                    f"{_GENERIC_LABELS[nutrient]}: {_format(value)}{unit} "
                    f"({percent}% of daily limit!)"
                ),
                action=critical_action,
                nutrient=nutrient,
                value=value,
                threshold=limits.critical,
                details={"daily_percent": percent},
            )
        if value > limits.meal:
            return Risk(
                type=AlertType.CAUTION,
                severity=Severity.MEDIUM,
                message=f"High {nutrient}: {_format(value)}{unit} in one meal",
                action=meal_action,
                nutrient=nutrient,
                value=value,
                threshold=limits.meal,
            )
        return None

    def _calorie_risk(self, food: FoodRecord) -> Risk | None:
        binge = self.thresholds.calories.binge
        if food.calories <= binge:
            return None
        minutes = math.ceil(food.calories / self.exercise_kcal_per_minute)
        return Risk(
            type=AlertType.HIGH_RISK,
            severity=Severity.HIGH,
            message=f"CALORIE OVERLOAD: {_format(food.calories)} calories in one meal!",
            action="Consider splitting this meal or choosing something lighter",
            nutrient="calories",
            value=food.calories,
            threshold=binge,
            details={
                "exercise_minutes": minutes,
                "impact": f"Would take about {_describe_minutes(minutes)} of exercise to burn off",
            },
        )

    def _condition_risks(self, food: FoodRecord, profile: UserProfile) -> list[Risk]:
        risks: list[Risk] = []
        for condition in profile.health_conditions:
            rule = self.thresholds.conditions.get(condition)
            if rule is None:
                continue
            for nutrient in rule.thresholds:
                limits = self.thresholds.limits_for(nutrient, condition)
                value = food.nutrient(nutrient)
                if limits is None or not value:
                    continue
                unit = NUTRIENT_UNITS.get(nutrient, "")
                label = condition.replace("_", " ")
                if value > limits.critical:
                    risks.append(
                        Risk(
                            type=AlertType.IMMEDIATE_DANGER,
                            severity=Severity.CRITICAL,
                            message=(
                                f"{label.upper()} DANGER: {_format(value)}{unit} "
                                f"of {nutrient.replace('_', ' ')}!"
                            ),
                            action=f"With {label}, you must avoid high-{nutrient.replace('_', ' ')} foods",
                            condition=condition,
                            nutrient=nutrient,
                            value=value,
                            threshold=limits.critical,
                        )
                    )
                elif value > limits.meal:
                    risks.append(
                        Risk(
                            type=AlertType.HIGH_RISK,
                            severity=Severity.HIGH,
                            message=(
                                f"Too high for {label}: {_format(value)}{unit} "
                                f"of {nutrient.replace('_', ' ')}"
                            ),
                            action="Choose a lower option or reduce portion",
                            condition=condition,
                            nutrient=nutrient,
                            value=value,
                            threshold=limits.meal,
                        )
                    )
        return risks


def _format(value: float) -> str:
    """Render a nutrient value without a trailing ``.0``."""
    return f"{value:g}"


def _describe_minutes(minutes: int) -> str:
    hours, remainder = divmod(minutes, 60)
    if hours == 0:
        return f"{remainder} minutes"
    if remainder == 0:
        return f"{hours}h"
    return f"{hours}h {remainder}min"
