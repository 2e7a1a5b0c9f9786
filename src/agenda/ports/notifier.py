"""Outbound message interface."""

from typing import Protocol


class Notifier(Protocol):
    """Interface for delivering a message to the user."""

    def send_message(self, subject: str, body: str) -> None:
        """Deliver a message. Raises NotificationError on failure."""
        ...
