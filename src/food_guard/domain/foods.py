"""Domain models for foods, profiles and evaluation context."""

from dataclasses import dataclass
from datetime import UTC, datetime

_NUTRIENT_FIELDS = {
    "calories": "calories",
    "protein": "protein_g",
    "carbs": "carbs_g",
    "fat": "fat_g",
    "fiber": "fiber_g",
    "sugar": "sugar_g",
    "sodium": "sodium_mg",
    "saturated_fat": "saturated_fat_g",
    "cholesterol": "cholesterol_mg",
}

NUTRIENT_UNITS = {
    "calories": "kcal",
    "protein": "g",
    "carbs": "g",
    "fat": "g",
    "fiber": "g",
    "sugar": "g",
    "sodium": "mg",
    "saturated_fat": "g",
    "cholesterol": "mg",
}


def normalize_tag(raw: str) -> str:
    """Normalize a free-form condition tag to lowercase_underscored form."""
    cleaned = raw.strip().lower().replace("-", " ")
    return "_".join(cleaned.split())


def normalize_text(raw: str | None) -> str:
    """Lowercase text and collapse separators to single spaces."""
    if not raw:
        return ""
    cleaned = raw.lower().replace("_", " ")
    return " ".join(cleaned.split())


def as_aware(moment: datetime) -> datetime:
    """Return ``moment`` with naive values read as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


@dataclass(frozen=True)
class FoodRecord:
    """Structured nutrition facts for one food."""

    name: str
    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    sugar_g: float = 0.0
    sodium_mg: float = 0.0
    saturated_fat_g: float = 0.0
    cholesterol_mg: float | None = None
    ingredients: str | None = None
    brand: str | None = None
    source: str | None = None
    health_score: float | None = None

    def nutrient(self, key: str) -> float | None:
        """Return the value for a nutrient key such as ``sodium``."""
        attribute = _NUTRIENT_FIELDS.get(key)
        if attribute is None:
            return None
        return getattr(self, attribute)

    def numeric_values(self) -> dict[str, float | None]:
        """Return every nutrient value keyed by nutrient name."""
        return {key: getattr(self, attr) for key, attr in _NUTRIENT_FIELDS.items()}


@dataclass(frozen=True)
class UserProfile:
    """Read-only view of a user's health profile."""

    user_id: str
    health_conditions: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()
    calorie_target: float = 2000.0
    protein_target_g: float | None = None
    carbs_target_g: float | None = None
    fat_target_g: float | None = None
    timezone: str = "UTC"

    def __post_init__(self) -> None:
        conditions: list[str] = []
        for raw in self.health_conditions:
            tag = normalize_tag(raw)
            if tag and tag not in conditions:
                conditions.append(tag)
        medications = [med.strip().lower() for med in self.medications if med.strip()]
        object.__setattr__(self, "health_conditions", tuple(conditions))
        object.__setattr__(self, "medications", tuple(medications))

    def has_condition(self, condition: str) -> bool:
        """Return whether the profile carries a normalized condition tag."""
        return normalize_tag(condition) in self.health_conditions


@dataclass(frozen=True)
class EvaluationContext:
    """Per-call situational context supplied by the caller."""

    location: str | None = None
    social_context: str | None = None
    mood: str | None = None
    meal_gap_minutes: float | None = None
    last_meal_at: datetime | None = None
    evaluated_at: datetime | None = None

    def resolve_meal_gap(self, now: datetime) -> float | None:
        """Return minutes since the last meal, if known."""
        if self.meal_gap_minutes is not None:
            return self.meal_gap_minutes
        if self.last_meal_at is None:
            return None
        elapsed = as_aware(now) - as_aware(self.last_meal_at)
        return elapsed.total_seconds() / 60


@dataclass(frozen=True)
class DailyIntake:
    """Today's running totals and the stored calorie target, if any."""

    calories: float = 0.0
    sodium_mg: float = 0.0
    sugar_g: float = 0.0
    saturated_fat_g: float = 0.0
    calorie_target: float | None = None
