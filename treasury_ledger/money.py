"""
Money conversion.

The API speaks decimal dollars, the ledger speaks integer cents.
usd_to_cents() is the only place a dollar amount becomes cents, so
this is the only place fractional-cent rounding can happen.
"""

from decimal import Decimal, InvalidOperation as DecimalError, ROUND_HALF_UP

from treasury_ledger.errors import InvalidAmount

CENTS_PER_DOLLAR = Decimal(100)

# Largest single amount the ledger accepts; keeps running balances
# well inside a BIGINT column.
MAX_AMOUNT_CENTS = 100_000_000_000 * 100


def usd_to_cents(amount_usd, field: str = "amountUsd") -> int:
    """
    Convert a positive dollar amount to integer cents.

    Rounds half-up, like round(amountUsd * 100) on the client side.
    Raises InvalidAmount for missing, non-numeric, non-finite or
    non-positive input, for amounts that round to zero cents, and
    for amounts above MAX_AMOUNT_CENTS.
    """
    if amount_usd is None or isinstance(amount_usd, bool):
        raise InvalidAmount(f"{field} must be a positive number")

    try:
        value = Decimal(str(amount_usd).strip())
    except (DecimalError, ValueError):
        raise InvalidAmount(f"{field} must be a positive number")

    if not value.is_finite() or value <= 0:
        raise InvalidAmount(f"{field} must be a positive number")

    # Checked before quantize, which fails past the decimal context precision
    raw_cents = value * CENTS_PER_DOLLAR
    if raw_cents > MAX_AMOUNT_CENTS:
        raise InvalidAmount(f"{field} must be at most $100,000,000,000")

    cents = int(raw_cents.quantize(Decimal("1"), ROUND_HALF_UP))
    if cents <= 0:
        raise InvalidAmount(f"{field} must be at least $0.01")
    return cents


def cents_to_usd(amount_cents: int) -> float:
    """Dollar value for display only. Never feed this back into the ledger."""
    return amount_cents / 100
