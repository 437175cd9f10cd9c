"""Notifier registry — singleton access to the configured notifier.

Uses the in-memory fake by default. A real adapter (message bus, webhook)
is installed with ``set_notifier`` at application start.
"""

from commerce.notifications.port import NotifierPort

_notifier: NotifierPort | None = None


def get_notifier() -> NotifierPort:
    global _notifier
    if _notifier is None:
        from commerce.notifications.fake import FakeNotifier

        _notifier = FakeNotifier()
    return _notifier


def set_notifier(notifier: NotifierPort) -> None:
    global _notifier
    _notifier = notifier


def reset_notifier() -> None:
    """Drop the current notifier (useful for testing)."""
    global _notifier
    _notifier = None
