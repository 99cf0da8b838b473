"""Pydantic models for the risk evaluation endpoint."""

from datetime import datetime

from pydantic import BaseModel, Field

from food_guard.domain.foods import EvaluationContext, FoodRecord, UserProfile


class FoodPayload(BaseModel):
    """Nutrition facts for the food being evaluated."""

    name: str = Field(min_length=1)
    calories: float = Field(default=0.0, ge=0.0)
    protein_g: float = Field(default=0.0, ge=0.0)
    carbs_g: float = Field(default=0.0, ge=0.0)
    fat_g: float = Field(default=0.0, ge=0.0)
    fiber_g: float = Field(default=0.0, ge=0.0)
    sugar_g: float = Field(default=0.0, ge=0.0)
    sodium_mg: float = Field(default=0.0, ge=0.0)
    saturated_fat_g: float = Field(default=0.0, ge=0.0)
    cholesterol_mg: float | None = Field(default=None, ge=0.0)
    ingredients: str | None = None
    brand: str | None = None
    source: str | None = None

    def to_domain(self) -> FoodRecord:
        return FoodRecord(**self.model_dump())


class ProfilePayload(BaseModel):
    """Health profile of the user the food is evaluated for."""

    user_id: str = Field(min_length=1)
    health_conditions: list[str] = Field(default_factory=list)
    medications: list[str] = Field(default_factory=list)
    calorie_target: float = Field(default=2000.0, gt=0.0)
    protein_target_g: float | None = None
    carbs_target_g: float | None = None
    fat_target_g: float | None = None
    timezone: str = "UTC"

    def to_domain(self) -> UserProfile:
        data = self.model_dump()
        data["health_conditions"] = tuple(self.health_conditions)
        data["medications"] = tuple(self.medications)
        return UserProfile(**data)


class ContextPayload(BaseModel):
    """Situational context for one evaluation."""

    location: str | None = None
    social_context: str | None = None
    mood: str | None = None
    meal_gap_minutes: float | None = Field(default=None, ge=0.0)
    last_meal_at: datetime | None = None

    def to_domain(self) -> EvaluationContext:
        return EvaluationContext(**self.model_dump())


class EvaluateRequest(BaseModel):
    """Request body for ``POST /risk/evaluate``."""

    food: FoodPayload
    profile: ProfilePayload
    context: ContextPayload | None = None
