"""Signed webhook delivery for critical alerts."""

import asyncio
import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

import httpx

from food_guard.errors import CollaboratorUnavailableError
from food_guard.services.alerts import AlertNotifier

_logger = logging.getLogger(__name__)

_SERVER_ERROR = 500


@dataclass
class HttpxWebhookNotifier(AlertNotifier):
    """Posts alert events to a single webhook URL."""

    url: str
    secret: str
    http_client: httpx.AsyncClient
    max_attempts: int = 3
    initial_delay_seconds: float = 1.0
    backoff_multiplier: float = 2.0
    timeout_seconds: float = 10.0

    @classmethod
    def create(cls, url: str, secret: str) -> "HttpxWebhookNotifier":
        """Create a notifier with a managed httpx session."""
        return cls(url=url, secret=secret, http_client=httpx.AsyncClient())

    async def notify(
        self, user_id: str, event_type: str, payload: dict[str, object]
    ) -> None:
        """Deliver an event, retrying transport and server errors."""
        event = {
            "id": uuid4().hex,
            "type": event_type,
            "user_id": user_id,
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "data": payload,
        }
        body = json.dumps(event, separators=(",", ":"), default=str).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "X-Webhook-Signature": sign_payload(self.secret, body),
            "X-Event-Type": event_type,
        }
        last_error = "no attempts made"
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = await self.http_client.post(
                    self.url, content=body, headers=headers, timeout=self.timeout_seconds
                )
            except httpx.TransportError as exc:
                last_error = str(exc) or type(exc).__name__
            else:
                if response.status_code < _SERVER_ERROR:
                    response.raise_for_status()
                    return
                last_error = f"status {response.status_code}"
            _logger.warning(
                "Webhook %s delivery failed (attempt %s/%s): %s",
                event_type,
                attempt,
                self.max_attempts,
                last_error,
            )
            if attempt < self.max_attempts:
                await asyncio.sleep(
                    self.initial_delay_seconds * self.backoff_multiplier ** (attempt - 1)
                )
        raise CollaboratorUnavailableError("alert webhook", last_error)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def sign_payload(secret: str, body: bytes) -> str:
    """Return the hex HMAC-SHA256 signature of a request body."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
