"""Domain models for detected risks and analysis results."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from food_guard.errors import RiskInvariantError


class AlertType(Enum):
    """Risk class with a fixed ordering weight."""

    IMMEDIATE_DANGER = "immediate_danger"
    ALLERGY_ALERT = "allergy_alert"
    HIGH_RISK = "high_risk"
    PATTERN_ALERT = "pattern_alert"
    CAUTION = "caution"

    @property
    def weight(self) -> int:
        """Return the ordering and scoring weight."""
        return _ALERT_WEIGHTS[self]

    @property
    def is_critical(self) -> bool:
        """Return whether this alert type blocks consumption."""
        return self in CRITICAL_ALERT_TYPES

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AlertType):
            return NotImplemented
        return self.weight < other.weight


_ALERT_WEIGHTS = {
    AlertType.IMMEDIATE_DANGER: 5,
    AlertType.ALLERGY_ALERT: 5,
    AlertType.HIGH_RISK: 3,
    AlertType.PATTERN_ALERT: 2,
    AlertType.CAUTION: 1,
}

CRITICAL_ALERT_TYPES = frozenset({AlertType.IMMEDIATE_DANGER, AlertType.ALLERGY_ALERT})


class Severity(Enum):
    """Human-facing severity label of a risk."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Verdict(Enum):
    """Final categorical recommendation."""

    SAFE = "SAFE"
    CAUTION = "CAUTION"
    NOT_RECOMMENDED = "NOT_RECOMMENDED"
    AVOID = "AVOID"


@dataclass(frozen=True)
class Risk:
    """A single structured finding that a food may be unsafe."""

    type: AlertType
    severity: Severity
    message: str
    action: str
    condition: str | None = None
    nutrient: str | None = None
    ingredient: str | None = None
    allergen: str | None = None
    medication: str | None = None
    pattern: str | None = None
    value: float | None = None
    threshold: float | None = None
    details: "MappingProxyType[str, object]" = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        if not isinstance(self.type, AlertType):
            raise RiskInvariantError(f"Risk type must be an AlertType: {self.type!r}")
        if not self.message or not self.action:
            raise RiskInvariantError(
                f"Risk {self.type.value} requires a message and an action"
            )
        if not isinstance(self.details, MappingProxyType):
            object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    @property
    def is_critical(self) -> bool:
        """Return whether the risk belongs to the critical tier."""
        return self.type.is_critical

    def to_dict(self) -> dict[str, object]:
        """Serialize the risk, omitting empty metadata."""
        payload: dict[str, object] = {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "action": self.action,
        }
        for key in (
            "condition",
            "nutrient",
            "ingredient",
            "allergen",
            "medication",
            "pattern",
            "value",
            "threshold",
        ):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        if self.details:
            payload["details"] = dict(self.details)
        return payload


@dataclass(frozen=True)
class Recommendation:
    """Verdict with a user-facing message."""

    verdict: Verdict
    message: str
    tips: tuple[str, ...] = ()
    alternative: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialize the recommendation."""
        payload: dict[str, object] = {
            "verdict": self.verdict.value,
            "message": self.message,
        }
        if self.tips:
            payload["tips"] = list(self.tips)
        if self.alternative:
            payload["alternative"] = self.alternative
        return payload


@dataclass(frozen=True)
class RiskAnalysisResult:
    """Outcome of one evaluation."""

    risks: tuple[Risk, ...]
    safety_score: int
    recommendation: Recommendation

    @property
    def has_risks(self) -> bool:
        return bool(self.risks)

    @property
    def risk_count(self) -> int:
        return len(self.risks)

    @property
    def critical_risks(self) -> tuple[Risk, ...]:
        return tuple(risk for risk in self.risks if risk.is_critical)

    def to_dict(self) -> dict[str, object]:
        """Serialize the full result."""
        return {
            "has_risks": self.has_risks,
            "risk_count": self.risk_count,
            "critical_risks": [risk.to_dict() for risk in self.critical_risks],
            "risks": [risk.to_dict() for risk in self.risks],
            "safety_score": self.safety_score,
            "recommendation": self.recommendation.to_dict(),
        }
