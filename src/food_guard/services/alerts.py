"""Critical alert notification interface."""

from typing import Protocol

CRITICAL_HEALTH_RISK_EVENT = "critical_health_risk"


class AlertNotifier(Protocol):
    """Best-effort delivery of critical alerts."""

    async def notify(
        self, user_id: str, event_type: str, payload: dict[str, object]
    ) -> None:
        """Deliver an event for a user."""


class NullAlertNotifier:
    """Notifier used when no alert endpoint is configured."""

    async def notify(
        self, user_id: str, event_type: str, payload: dict[str, object]
    ) -> None:
        return None
