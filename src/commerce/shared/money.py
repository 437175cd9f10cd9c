"""Money value object for monetary amounts with currency.

Amounts are held as integer minor units so that sums and products stay
exact. Values always carry two fractional digits, rounded HALF_UP.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer, String

from commerce.domain import commerce
from commerce.errors import CurrencyMismatch, InvalidAmount, InvalidCurrency, InvalidQuantity

DEFAULT_CURRENCY = "BRL"

_CENT = Decimal("0.01")

VALID_CURRENCIES = frozenset(
    {
        "BRL",
        "USD",
        "EUR",
        "GBP",
        "JPY",
        "CAD",
        "AUD",
        "CHF",
        "CNY",
        "INR",
        "MXN",
        "ARS",
        "CLP",
        "COP",
        "PEN",
        "UYU",
    }
)


def _check_currency(currency: str) -> str:
    if currency not in VALID_CURRENCIES:
        raise InvalidCurrency(currency)
    return currency


def _to_decimal(amount) -> Decimal:
    if isinstance(amount, Decimal):
        value = amount
    elif isinstance(amount, bool):
        raise InvalidAmount(amount, "Amount must be numeric")
    elif isinstance(amount, (int, str)):
        try:
            value = Decimal(amount.strip() if isinstance(amount, str) else amount)
        except InvalidOperation:
            raise InvalidAmount(amount, "Amount must be numeric") from None
    elif isinstance(amount, float):
        # repr() of a float is its shortest round-tripping form: 19.99 -> "19.99"
        value = Decimal(repr(amount))
    else:
        raise InvalidAmount(amount, "Amount must be numeric")

    if not value.is_finite():
        raise InvalidAmount(amount, "Amount must be finite")
    return value


@commerce.value_object
class Money:
    """Immutable, currency-tagged amount with two fractional digits."""

    cents = Integer(required=True, min_value=0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)

    @invariant.post
    def currency_must_be_supported(self):
        if self.currency not in VALID_CURRENCIES:
            raise ValidationError({"currency": [f"Unsupported currency: {self.currency}"]})

    # -------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------
    @classmethod
    def of(cls, amount, currency: str = DEFAULT_CURRENCY) -> "Money":
        """Build a Money from a decimal-like amount, rounding HALF_UP to cents."""
        _check_currency(currency)
        value = _to_decimal(amount)
        # sign is checked before rounding so -0.004 is not accepted as 0.00
        if value < 0:
            raise InvalidAmount(value)
        value = value.quantize(_CENT, rounding=ROUND_HALF_UP)
        return cls(cents=int(value.scaleb(2)), currency=currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(cents=0, currency=_check_currency(currency))

    @property
    def amount(self) -> Decimal:
        return Decimal(self.cents).scaleb(-2)

    # -------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------
    def _same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatch(self.currency, other.currency)

    def add(self, other: "Money") -> "Money":
        self._same_currency(other)
        return Money(cents=self.cents + other.cents, currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        """Difference of two amounts. A negative result is rejected."""
        self._same_currency(other)
        cents = self.cents - other.cents
        if cents < 0:
            raise InvalidAmount(Decimal(cents).scaleb(-2), "Subtraction would result in a negative amount")
        return Money(cents=cents, currency=self.currency)

    def multiply(self, quantity: int) -> "Money":
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise InvalidQuantity(quantity, minimum=0)
        return Money(cents=self.cents * quantity, currency=self.currency)

    # -------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------
    def compare(self, other: "Money") -> int:
        """Return -1, 0 or 1 as this amount is less than, equal to or greater than ``other``."""
        self._same_currency(other)
        return (self.cents > other.cents) - (self.cents < other.cents)

    def is_greater_than(self, other: "Money") -> bool:
        return self.compare(other) > 0

    def is_less_than(self, other: "Money") -> bool:
        return self.compare(other) < 0

    def is_zero(self) -> bool:
        return self.cents == 0

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"


def sum_money(values, currency: str = DEFAULT_CURRENCY) -> Money:
    """Add up an iterable of Money, starting from zero in ``currency``."""
    total = Money.zero(currency)
    for value in values:
        total = total.add(value)
    return total
