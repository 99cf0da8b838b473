"""Adapter turning ingredient analyzer findings into risks."""

from dataclasses import dataclass

from food_guard.domain.foods import EvaluationContext, FoodRecord, UserProfile
from food_guard.domain.ingredients import HarmfulIngredient, IngredientAnalysis
from food_guard.domain.risks import AlertType, Risk, Severity
from food_guard.services.ingredients import IngredientAnalyzer

_SEVERITIES = {
    "very_high": Severity.HIGH,
    "high": Severity.HIGH,
    "medium": Severity.MEDIUM,
    "low": Severity.LOW,
}


@dataclass
class IngredientRiskDetector:
    """Reinterprets ingredient analysis as risk records."""

    analyzer: IngredientAnalyzer
    hidden_sugar_limit: int = 3
    name: str = "ingredient"

    async def detect(
        self, food: FoodRecord, profile: UserProfile, context: EvaluationContext
    ) -> list[Risk]:
        """Return ingredient risks, or nothing when no ingredients are listed."""
        if not food.ingredients or not food.ingredients.strip():
            return []
        analysis = await self.analyzer.analyze(food.ingredients, profile)
        return self.to_risks(analysis)

    def to_risks(self, analysis: IngredientAnalysis) -> list[Risk]:
        """Map an analysis onto risk records."""
        risks = [_ingredient_risk(item) for item in analysis.harmful_ingredients]
        if analysis.processing_level == "ultra_processed":
            risks.append(
                Risk(
                    type=AlertType.HIGH_RISK,
                    severity=Severity.HIGH,
                    message="ULTRA-PROCESSED: This product is heavily processed with multiple additives",
                    action="Choose whole foods or minimally processed alternatives",
                    details={
                        "health_impact": "Linked to obesity, diabetes, and heart disease"
                    },
                )
            )
        sugars = analysis.hidden_sugars
        if len(sugars) > self.hidden_sugar_limit:
            risks.append(
                Risk(
                    type=AlertType.CAUTION,
                    severity=Severity.MEDIUM,
                    message=(
                        f"Hidden sugars detected: {len(sugars)} different types "
                        f"({', '.join(sugars)})"
                    ),
                    action="Check total sugar content and consider alternatives",
                    details={"sugars": tuple(sugars)},
                )
            )
        return risks


def _ingredient_risk(item: HarmfulIngredient) -> Risk:
    effective = item.personal_severity or item.severity
    very_high = "very_high" in (item.personal_severity, item.severity)
    description = ", ".join(item.risks) if item.risks else "flagged as harmful"
    action = (
        item.alternative_products[0]
        if item.alternative_products
        else "Choose a cleaner alternative"
    )
    return Risk(
        type=AlertType.HIGH_RISK if very_high else AlertType.CAUTION,
        severity=Severity.HIGH if very_high else _SEVERITIES[effective],
        message=f"Contains {item.name}: {description}",
        action=action,
        ingredient=item.name,
        details={"category": item.category},
    )
