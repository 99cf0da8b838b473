"""Food-drug interaction checks."""

from dataclasses import dataclass

from food_guard.domain.foods import (
    EvaluationContext,
    FoodRecord,
    UserProfile,
    normalize_text,
)
from food_guard.domain.risks import AlertType, Risk, Severity
from food_guard.domain.thresholds import InteractionTable


@dataclass
class FoodDrugInteractionDetector:
    """Matches the food against foods known to interfere with medications."""

    interactions: InteractionTable
    name: str = "drug"

    async def detect(
        self, food: FoodRecord, profile: UserProfile, context: EvaluationContext
    ) -> list[Risk]:
        """Return one risk per interacting medication."""
        food_name = normalize_text(food.name)
        risks: list[Risk] = []
        for medication in profile.medications:
            interaction = self.interactions.lookup(medication)
            if interaction is None:
                continue
            matched = next((item for item in interaction.foods if item in food_name), None)
            if matched is None:
                continue
            action = (
                f"Wait {interaction.timing} after taking medication"
                if interaction.timing
                else "Consult your doctor about this combination"
            )
            details: dict[str, object] = {
                "interaction": "food_drug",
                "matched_food": matched,
                "risk": interaction.risk,
            }
            if interaction.nutrient:
                details["nutrient"] = interaction.nutrient
            risks.append(
                Risk(
                    type=AlertType.HIGH_RISK,
                    severity=Severity.HIGH,
                    message=f"MEDICATION INTERACTION: {food.name} can interfere with {medication}",
                    action=action,
                    medication=medication,
                    details=details,
                )
            )
        return risks
