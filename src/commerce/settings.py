"""Business settings read from the ``[custom]`` section of the domain config."""

from protean.utils.globals import current_domain

from commerce.shared.money import DEFAULT_CURRENCY

DEFAULT_LOW_STOCK_THRESHOLD = 5
DEFAULT_MAX_CHECKOUT_ATTEMPTS = 3
DEFAULT_MAX_WRITE_ATTEMPTS = 3


def _custom() -> dict:
    if not current_domain:
        return {}
    return current_domain.config.get("custom", {}) or {}


def currency() -> str:
    """Currency used for new carts and for products registered without one."""
    return str(_custom().get("CURRENCY", DEFAULT_CURRENCY))


def low_stock_threshold() -> int:
    return int(_custom().get("LOW_STOCK_THRESHOLD", DEFAULT_LOW_STOCK_THRESHOLD))


def max_checkout_attempts() -> int:
    """How many times checkout is attempted when a stock ledger changes underneath it."""
    return max(1, int(_custom().get("MAX_CHECKOUT_ATTEMPTS", DEFAULT_MAX_CHECKOUT_ATTEMPTS)))


def max_write_attempts() -> int:
    """Attempts for cart and stock commands that race on a first-time insert or a version check."""
    return max(1, int(_custom().get("MAX_WRITE_ATTEMPTS", DEFAULT_MAX_WRITE_ATTEMPTS)))
