"""Risk aggregation across all detectors."""

import asyncio
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from food_guard.domain.foods import EvaluationContext, FoodRecord, UserProfile
from food_guard.domain.risks import (
    AlertType,
    Recommendation,
    Risk,
    RiskAnalysisResult,
    Verdict,
)
from food_guard.errors import InvalidEvaluationInputError
from food_guard.services.alerts import (
    CRITICAL_HEALTH_RISK_EVENT,
    AlertNotifier,
    NullAlertNotifier,
)
from food_guard.services.detectors.base import RiskDetector

_logger = logging.getLogger(__name__)

SCORE_PENALTY_PER_WEIGHT = 10
MAX_TIPS = 2


@dataclass
class RiskAggregator:
    """Runs every detector concurrently and folds the risks into one result.

    Detectors are merged in the order given, which is also the tie-break
    order among risks of equal weight.
    """

    detectors: Sequence[RiskDetector]
    notifier: AlertNotifier = field(default_factory=NullAlertNotifier)
    isolate_detector_failures: bool = True
    _pending_alerts: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False
    )

    async def evaluate(
        self,
        food: FoodRecord,
        profile: UserProfile,
        context: EvaluationContext | None = None,
    ) -> RiskAnalysisResult:
        """Evaluate a food for a user and return a fresh analysis result."""
        validate_inputs(food, profile)
        resolved_context = context or EvaluationContext()

        outcomes = await asyncio.gather(
            *(
                detector.detect(food, profile, resolved_context)
                for detector in self.detectors
            ),
            return_exceptions=True,
        )
        risks: list[Risk] = []
        for detector, outcome in zip(self.detectors, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                if not self.isolate_detector_failures:
                    raise outcome
                _logger.error(
                    "Risk detector %s failed for user=%s food=%s",
                    detector.name,
                    profile.user_id,
                    food.name,
                    exc_info=outcome,
                )
                continue
            risks.extend(outcome)

        ordered = sort_risks(risks)
        result = RiskAnalysisResult(
            risks=ordered,
            safety_score=calculate_safety_score(ordered),
            recommendation=build_recommendation(ordered),
        )
        if result.critical_risks:
            self._dispatch_alert(profile.user_id, food, result.critical_risks[0])
        return result

    async def flush_alerts(self) -> None:
        """Wait for pending alert notifications to finish."""
        if self._pending_alerts:
            await asyncio.gather(*self._pending_alerts, return_exceptions=True)

    def _dispatch_alert(self, user_id: str, food: FoodRecord, risk: Risk) -> None:
        payload: dict[str, object] = {
            "risk": risk.to_dict(),
            "food": food.name,
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "urgency": "immediate",
        }
        task = asyncio.get_running_loop().create_task(
            self._send_alert(user_id, payload)
        )
        self._pending_alerts.add(task)
        task.add_done_callback(self._pending_alerts.discard)

    async def _send_alert(self, user_id: str, payload: dict[str, object]) -> None:
        try:
            await self.notifier.notify(user_id, CRITICAL_HEALTH_RISK_EVENT, payload)
        except Exception:
            _logger.exception("Failed to send critical alert for user=%s", user_id)


def validate_inputs(food: FoodRecord, profile: UserProfile) -> None:
    """Reject inputs that cannot be evaluated safely."""
    if not isinstance(food, FoodRecord):
        raise InvalidEvaluationInputError("food must be a FoodRecord")
    if not isinstance(profile, UserProfile):
        raise InvalidEvaluationInputError("profile must be a UserProfile")
    if not isinstance(food.name, str) or not food.name.strip():
        raise InvalidEvaluationInputError("food name is required")
    if not isinstance(profile.user_id, str) or not profile.user_id.strip():
        raise InvalidEvaluationInputError("profile user_id is required")
    for nutrient, value in food.numeric_values().items():
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise InvalidEvaluationInputError(f"{nutrient} must be a number")
        if not math.isfinite(value) or value < 0:
            raise InvalidEvaluationInputError(
                f"{nutrient} must be a non-negative finite number"
            )
    try:
        ZoneInfo(profile.timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidEvaluationInputError(
            f"unknown timezone: {profile.timezone}"
        ) from exc


def sort_risks(risks: list[Risk]) -> tuple[Risk, ...]:
    """Order risks by descending weight, keeping detector order for ties."""
    return tuple(sorted(risks, key=lambda risk: risk.type.weight, reverse=True))


def calculate_safety_score(risks: Sequence[Risk]) -> int:
    """Return a 0-100 score that drops with each risk's weight."""
    penalty = sum(risk.type.weight * SCORE_PENALTY_PER_WEIGHT for risk in risks)
    return max(0, 100 - penalty)


def build_recommendation(risks: Sequence[Risk]) -> Recommendation:
    """Derive the verdict and user message from ordered risks."""
    if not risks:
        return Recommendation(
            verdict=Verdict.SAFE, message="This food is safe for you to consume"
        )
    if any(risk.is_critical for risk in risks):
        return Recommendation(
            verdict=Verdict.AVOID,
            message="DO NOT CONSUME - Serious health risk detected",
            alternative="Find a safe alternative immediately",
        )
    if any(risk.type is AlertType.HIGH_RISK for risk in risks):
        return Recommendation(
            verdict=Verdict.NOT_RECOMMENDED,
            message="High health risks - strongly advise against",
            alternative="Consider healthier options",
        )
    tips: list[str] = []
    for risk in risks:
        if risk.action and risk.action not in tips:
            tips.append(risk.action)
        if len(tips) == MAX_TIPS:
            break
    return Recommendation(
        verdict=Verdict.CAUTION,
        message="Consume with caution - some concerns detected",
        tips=tuple(tips),
    )
