"""Historical and temporal eating pattern checks."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from food_guard.domain.foods import (
    DailyIntake,
    EvaluationContext,
    FoodRecord,
    UserProfile,
    as_aware,
)
from food_guard.domain.risks import AlertType, Risk, Severity
from food_guard.domain.thresholds import PatternPolicy, ThresholdTable
from food_guard.services.history import HistoryStore

_logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class HistorySnapshot:
    """Aggregates fetched once per evaluation."""

    today: DailyIntake
    recent_foods: list[FoodRecord]


@dataclass
class HistoricalPatternDetector:
    """Detects risky patterns from rolling history and timing."""

    store: HistoryStore
    thresholds: ThresholdTable
    policy: PatternPolicy = field(default_factory=PatternPolicy)
    clock: Callable[[], datetime] = _utc_now
    name: str = "pattern"

    async def detect(
        self, food: FoodRecord, profile: UserProfile, context: EvaluationContext
    ) -> list[Risk]:
        """Return pattern risks for the food being logged."""
        now = as_aware(context.evaluated_at or self.clock())
        risks: list[Risk] = []
        snapshot = await self._load_history(profile)
        if snapshot is not None:
            excess = self._daily_excess(food, profile, snapshot.today)
            if excess is not None:
                risks.append(excess)
            repetition = self._repetition(food, snapshot.recent_foods)
            if repetition is not None:
                risks.append(repetition)
        late_night = self._late_night(food, profile, now)
        if late_night is not None:
            risks.append(late_night)
        binge = self._potential_binge(food, context, now)
        if binge is not None:
            risks.append(binge)
        return risks

    async def _load_history(self, profile: UserProfile) -> HistorySnapshot | None:
        """Fetch today's totals and recent foods within the policy timeout."""
        try:
            today, recent = await asyncio.wait_for(
                asyncio.gather(
                    asyncio.to_thread(
                        self.store.get_today_totals, profile.user_id, profile.timezone
                    ),
                    asyncio.to_thread(
                        self.store.get_recent_foods,
                        profile.user_id,
                        self.policy.recent_days,
                    ),
                ),
                timeout=self.policy.history_timeout_seconds,
            )
        except TimeoutError:
            _logger.warning(
                "History query timed out after %ss for user=%s",
                self.policy.history_timeout_seconds,
                profile.user_id,
            )
            return None
        return HistorySnapshot(today=today, recent_foods=recent)

    def _daily_excess(
        self, food: FoodRecord, profile: UserProfile, today: DailyIntake
    ) -> Risk | None:
        target = today.calorie_target or profile.calorie_target
        projected = today.calories + food.calories
        limit = target + self.thresholds.calories.day_excess
        if projected <= limit:
            return None
        overage = projected - target
        return Risk(
            type=AlertType.PATTERN_ALERT,
            severity=Severity.MEDIUM,
            message=f"This would put you {overage:g} calories over target",
            action="Consider a lighter option or save for tomorrow",
            pattern="daily_excess",
            value=projected,
            threshold=limit,
            details={
                "today_total": today.calories,
                "projected": projected,
                "target": target,
            },
        )

    def _repetition(self, food: FoodRecord, recent: list[FoodRecord]) -> Risk | None:
        needle = food.name.strip().lower()
        if not needle:
            return None
        count = sum(
            1
            for past in recent
            if needle in past.name.lower()
            and past.health_score is not None
            and past.health_score < self.policy.unhealthy_score_below
        )
        if count <= self.policy.repetition_min_count:
            return None
        return Risk(
            type=AlertType.PATTERN_ALERT,
            severity=Severity.HIGH,
            message=f"You've had {food.name} {count} times this week",
            action="Break the pattern - your body needs variety and nutrients",
            pattern="repetitive_unhealthy",
            value=count,
            threshold=self.policy.repetition_min_count,
            details={"frequency": count},
        )

    def _late_night(
        self, food: FoodRecord, profile: UserProfile, now: datetime
    ) -> Risk | None:
        local_hour = now.astimezone(ZoneInfo(profile.timezone)).hour
        if local_hour < self.policy.late_night_hour:
            return None
        if food.calories <= self.policy.late_night_calories:
            return None
        return Risk(
            type=AlertType.PATTERN_ALERT,
            severity=Severity.MEDIUM,
            message="Late night and high calories: your metabolism is slowest now",
            action="Save this for breakfast",
            pattern="late_night_eating",
            value=food.calories,
            threshold=self.policy.late_night_calories,
            details={"local_hour": local_hour},
        )

    def _potential_binge(
        self, food: FoodRecord, context: EvaluationContext, now: datetime
    ) -> Risk | None:
        gap = context.resolve_meal_gap(now)
        if gap is None or gap >= self.policy.binge_gap_minutes:
            return None
        if food.calories <= self.policy.binge_calories:
            return None
        details: dict[str, object] = {"meal_gap_minutes": gap}
        if context.last_meal_at is not None:
            details["last_meal_at"] = context.last_meal_at.isoformat()
        return Risk(
            type=AlertType.PATTERN_ALERT,
            severity=Severity.HIGH,
            message="Eating again so soon? This might be emotional eating",
            action="Take 5 minutes to check in with yourself before logging",
            pattern="potential_binge",
            value=food.calories,
            threshold=self.policy.binge_calories,
            details=details,
        )
