"""Common detector interface."""

from typing import Protocol

from food_guard.domain.foods import EvaluationContext, FoodRecord, UserProfile
from food_guard.domain.risks import Risk


class RiskDetector(Protocol):
    """A read-only unit of risk detection."""

    name: str

    async def detect(
        self, food: FoodRecord, profile: UserProfile, context: EvaluationContext
    ) -> list[Risk]:
        """Return the risks this detector finds for a food."""
