"""Fake notifier adapter — records published events for testing."""

from uuid import uuid4

from commerce.notifications.port import NotifierPort


class FakeNotifier(NotifierPort):
    """Notifier that keeps messages in memory for test assertions."""

    def __init__(self):
        self.published: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification delivery failed"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def publish(self, event_type: str, payload: dict) -> dict:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)

        message_id = f"evt-{uuid4().hex[:12]}"
        self.published.append({"message_id": message_id, "event_type": event_type, "payload": payload})
        return {"message_id": message_id, "status": "sent"}

    def of_type(self, event_type: str) -> list[dict]:
        return [message for message in self.published if message["event_type"] == event_type]

    def reset(self):
        """Clear published events (useful between tests)."""
        self.published.clear()
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
