"""Tests for the historical pattern detector."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from food_guard.domain.foods import DailyIntake, EvaluationContext, UserProfile
from food_guard.domain.risks import AlertType, Severity
from food_guard.domain.thresholds import PatternPolicy, ThresholdTable
from food_guard.errors import CollaboratorUnavailableError
from food_guard.services.detectors.patterns import HistoricalPatternDetector
from tests.conftest import InMemoryHistoryStore, make_food

NOON = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)
PROFILE = UserProfile(user_id="u1")


def _detector(
    store: InMemoryHistoryStore, policy: PatternPolicy | None = None
) -> HistoricalPatternDetector:
    return HistoricalPatternDetector(
        store=store,
        thresholds=ThresholdTable.default(),
        policy=policy or PatternPolicy(),
        clock=lambda: NOON,
    )


def test_daily_excess_projection() -> None:
    store = InMemoryHistoryStore(today=DailyIntake(calories=1800, calorie_target=2000))

    risks = asyncio.run(
        _detector(store).detect(make_food("pasta", calories=800), PROFILE, EvaluationContext())
    )

    assert len(risks) == 1
    assert risks[0].type is AlertType.PATTERN_ALERT
    assert risks[0].severity is Severity.MEDIUM
    assert risks[0].pattern == "daily_excess"
    assert risks[0].value == 2600
    assert risks[0].details["projected"] == 2600
    assert "600 calories over target" in risks[0].message


def test_daily_excess_not_triggered_at_limit() -> None:
    store = InMemoryHistoryStore(today=DailyIntake(calories=1700, calorie_target=2000))

    risks = asyncio.run(
        _detector(store).detect(make_food("pasta", calories=800), PROFILE, EvaluationContext())
    )

    assert risks == []


def test_repetitive_unhealthy_food() -> None:
    past = [make_food("Cheese Pizza Slice", health_score=30) for _ in range(4)]
    past.append(make_food("Pizza", health_score=80))
    past.append(make_food("Pizza", health_score=None))
    store = InMemoryHistoryStore(recent_foods=past)

    risks = asyncio.run(
        _detector(store).detect(make_food("pizza"), PROFILE, EvaluationContext())
    )

    assert [r.pattern for r in risks] == ["repetitive_unhealthy"]
    assert risks[0].details["frequency"] == 4
    assert risks[0].severity is Severity.HIGH
    assert ("recent", 7) in store.calls


def test_repetition_needs_more_than_three() -> None:
    past = [make_food("pizza", health_score=30) for _ in range(3)]
    store = InMemoryHistoryStore(recent_foods=past)

    risks = asyncio.run(
        _detector(store).detect(make_food("pizza"), PROFILE, EvaluationContext())
    )

    assert risks == []


def test_late_night_uses_profile_timezone() -> None:
    store = InMemoryHistoryStore()
    profile = UserProfile(user_id="u1", timezone="Asia/Tokyo")
    # 12:30 UTC is 21:30 in Tokyo.
    context = EvaluationContext(evaluated_at=NOON + timedelta(minutes=30))

    risks = asyncio.run(
        _detector(store).detect(make_food("ramen", calories=450), profile, context)
    )

    assert [r.pattern for r in risks] == ["late_night_eating"]
    assert risks[0].details["local_hour"] == 21
    assert ("today", "Asia/Tokyo") in store.calls


def test_potential_binge_from_last_meal_time() -> None:
    context = EvaluationContext(last_meal_at=NOON - timedelta(minutes=20))

    risks = asyncio.run(
        _detector(InMemoryHistoryStore()).detect(
            make_food("burger", calories=650), PROFILE, context
        )
    )

    assert [r.pattern for r in risks] == ["potential_binge"]
    assert risks[0].details["meal_gap_minutes"] == 20
    assert "check in with yourself" in risks[0].action


def test_all_patterns_can_fire_together() -> None:
    store = InMemoryHistoryStore(
        today=DailyIntake(calories=2400, calorie_target=2000),
        recent_foods=[make_food("fries", health_score=10) for _ in range(5)],
    )
    context = EvaluationContext(
        meal_gap_minutes=15, evaluated_at=datetime(2026, 3, 2, 22, 0, tzinfo=UTC)
    )

    risks = asyncio.run(
        _detector(store).detect(make_food("fries", calories=500), PROFILE, context)
    )

    assert [r.pattern for r in risks] == [
        "daily_excess",
        "repetitive_unhealthy",
        "late_night_eating",
        "potential_binge",
    ]


def test_history_timeout_keeps_timing_rules() -> None:
    store = InMemoryHistoryStore(
        today=DailyIntake(calories=5000, calorie_target=2000), delay_seconds=0.2
    )
    policy = PatternPolicy(history_timeout_seconds=0.01)
    context = EvaluationContext(meal_gap_minutes=5)

    risks = asyncio.run(
        _detector(store, policy).detect(make_food("cake", calories=500), PROFILE, context)
    )

    assert [r.pattern for r in risks] == ["potential_binge"]


def test_history_failure_propagates() -> None:
    store = InMemoryHistoryStore(unavailable=True)

    with pytest.raises(CollaboratorUnavailableError):
        asyncio.run(
            _detector(store).detect(make_food("cake"), PROFILE, EvaluationContext())
        )


def test_naive_last_meal_time_is_read_as_utc() -> None:
    store = InMemoryHistoryStore(today=DailyIntake(calories=1800, calorie_target=2000))
    context = EvaluationContext(last_meal_at=datetime(2026, 3, 2, 11, 50))

    risks = asyncio.run(
        _detector(store).detect(make_food("lasagna", calories=800), PROFILE, context)
    )

    assert [r.pattern for r in risks] == ["daily_excess", "potential_binge"]
    assert risks[1].details["meal_gap_minutes"] == 10


def test_naive_evaluation_time_is_read_as_utc() -> None:
    context = EvaluationContext(
        last_meal_at=datetime(2026, 3, 2, 21, 30, tzinfo=UTC),
        evaluated_at=datetime(2026, 3, 2, 22, 0),
    )

    risks = asyncio.run(
        _detector(InMemoryHistoryStore()).detect(
            make_food("nachos", calories=500), PROFILE, context
        )
    )

    assert [r.pattern for r in risks] == ["late_night_eating", "potential_binge"]
    assert risks[0].details["local_hour"] == 22
    assert risks[1].details["meal_gap_minutes"] == 30


def test_daily_excess_falls_back_to_profile_target() -> None:
    store = InMemoryHistoryStore(today=DailyIntake(calories=1200))
    profile = UserProfile(user_id="u1", calorie_target=1500)

    risks = asyncio.run(
        _detector(store).detect(
            make_food("curry", calories=900), profile, EvaluationContext()
        )
    )

    assert [r.pattern for r in risks] == ["daily_excess"]
    assert risks[0].details["target"] == 1500
    assert "600 calories over target" in risks[0].message


def test_stored_target_wins_over_profile_target() -> None:
    store = InMemoryHistoryStore(today=DailyIntake(calories=1200, calorie_target=2500))
    profile = UserProfile(user_id="u1", calorie_target=1500)

    risks = asyncio.run(
        _detector(store).detect(
            make_food("curry", calories=900), profile, EvaluationContext()
        )
    )

    assert risks == []
