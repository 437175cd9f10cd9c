"""Notifier port — where domain events leave the core."""

from abc import ABC, abstractmethod


class NotifierPort(ABC):
    """Abstract interface for event delivery adapters."""

    @abstractmethod
    def publish(self, event_type: str, payload: dict) -> dict:
        """Deliver one event.

        Returns:
            dict with keys: message_id, status ("sent")

        Raises on delivery failure; callers log and carry on.
        """
        ...
