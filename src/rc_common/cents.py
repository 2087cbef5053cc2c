"""Integer-cents money helpers.

Charges are stored and computed as int cents; the API accepts and returns
decimal amounts with two fractional digits. Conversion happens only at the
schema boundary and when talking to the payment processor (whose minor unit
is also the cent).
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CENT = Decimal("0.01")


def to_cents(amount: Decimal | int | float | str) -> int:
    """Convert a decimal amount to int cents: Decimal('800.00') -> 80000.

    Raises ValueError for negatives, non-numbers and more than two decimals.
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Amount is not a number: {amount!r}") from None
    if not value.is_finite():
        raise ValueError(f"Amount is not a number: {amount!r}")
    if value < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")
    if value != value.quantize(_CENT):
        raise ValueError(f"Amount has more than two decimal places: {amount}")
    return int((value * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def cents_to_decimal(cents: int) -> Decimal:
    """80000 -> Decimal('800.00')."""
    return (Decimal(cents) / 100).quantize(_CENT)


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 80000 -> '$800.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
