"""Notifier adapters - webhook (live) and log (stub)."""

import logging

import requests

from agenda.core.errors import AgendaError

logger = logging.getLogger(__name__)


class NotificationError(AgendaError):
    """Raised when a message cannot be delivered."""


class WebhookNotifier:
    """
    Posts messages as JSON to a webhook.

    Implements Notifier protocol.
    """

    def __init__(self, url: str, timeout: int = 30, session: requests.Session | None = None):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def send_message(self, subject: str, body: str) -> None:
        try:
            resp = self._session.post(
                self.url,
                json={"subject": subject, "body": body},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Webhook delivery failed: {e}")
            raise NotificationError(f"Failed to send {subject!r}: {e}") from e
        logger.info(f"Sent {subject!r} to webhook")


class LogNotifier:
    """
    Logs messages instead of sending them.

    Implements Notifier protocol. Keeps an outbox for inspection.
    """

    def __init__(self):
        self.outbox: list[tuple[str, str]] = []

    def send_message(self, subject: str, body: str) -> None:
        logger.info(f"[stub] {subject}\n{body}")
        self.outbox.append((subject, body))
