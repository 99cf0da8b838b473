"""Supabase repository for historical food aggregates."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from supabase import Client

from food_guard.domain.foods import DailyIntake, FoodRecord
from food_guard.services.history import HistoryStore

_FOOD_COLUMNS = (
    "name, calories, protein_g, carbs_g, fat_g, fiber_g, sugar_g, sodium_mg, "
    "saturated_fat_g, cholesterol_mg, ingredients, brand, source, health_score"
)


@dataclass
class SupabaseHistoryRepository(HistoryStore):
    """Supabase implementation of the history store."""

    client: Client

    def get_today_totals(self, user_id: str, timezone_name: str) -> DailyIntake:
        """Sum today's logged foods in the user's timezone."""
        tz = ZoneInfo(timezone_name)
        start = datetime.now(tz=tz).replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        response = (
            self.client.table("food_logs")
            .select("calories, sodium_mg, sugar_g, saturated_fat_g")
            .eq("user_id", user_id)
            .gte("logged_at", start.astimezone(UTC).isoformat())
            .lt("logged_at", end.astimezone(UTC).isoformat())
            .execute()
        )
        rows = response.data or []
        return DailyIntake(
            calories=_sum(rows, "calories"),
            sodium_mg=_sum(rows, "sodium_mg"),
            sugar_g=_sum(rows, "sugar_g"),
            saturated_fat_g=_sum(rows, "saturated_fat_g"),
            calorie_target=self._calorie_target(user_id),
        )

    def get_recent_foods(self, user_id: str, days: int) -> list[FoodRecord]:
        """Return foods logged during the last ``days`` days."""
        since = datetime.now(tz=UTC) - timedelta(days=days)
        response = (
            self.client.table("food_logs")
            .select(_FOOD_COLUMNS)
            .eq("user_id", user_id)
            .gte("logged_at", since.isoformat())
            .order("logged_at", desc=True)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def _calorie_target(self, user_id: str) -> float | None:
        response = (
            self.client.table("user_settings")
            .select("calorie_target")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        target = response.data[0].get("calorie_target")
        return float(target) if target else None


def _sum(rows: list[dict[str, object]], column: str) -> float:
    return sum(float(row.get(column) or 0.0) for row in rows)


def _optional_float(value: object) -> float | None:
    return float(value) if value is not None else None


def _parse_food(row: dict[str, object]) -> FoodRecord:
    return FoodRecord(
        name=str(row.get("name") or ""),
        calories=float(row.get("calories") or 0.0),
        protein_g=float(row.get("protein_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        fat_g=float(row.get("fat_g") or 0.0),
        fiber_g=float(row.get("fiber_g") or 0.0),
        sugar_g=float(row.get("sugar_g") or 0.0),
        sodium_mg=float(row.get("sodium_mg") or 0.0),
        saturated_fat_g=float(row.get("saturated_fat_g") or 0.0),
        cholesterol_mg=_optional_float(row.get("cholesterol_mg")),
        ingredients=row.get("ingredients"),
        brand=row.get("brand"),
        source=row.get("source"),
        health_score=_optional_float(row.get("health_score")),
    )
