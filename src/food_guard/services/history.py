"""Historical aggregates store interface."""

from typing import Protocol

from food_guard.domain.foods import DailyIntake, FoodRecord


class HistoryStore(Protocol):
    """Read-only access to a user's logged foods."""

    def get_today_totals(self, user_id: str, timezone_name: str) -> DailyIntake:
        """Return today's running totals in the user's timezone."""

    def get_recent_foods(self, user_id: str, days: int) -> list[FoodRecord]:
        """Return foods logged over the last ``days`` days."""
