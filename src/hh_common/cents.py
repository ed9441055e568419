"""Integer arithmetic utilities for cents-based balances.

All task values, bonuses, balances and transaction amounts are int cents.
No float, no Decimal.
"""


def validate_positive_amount(amount: int) -> None:
    """Raise ValueError unless amount is a strictly positive int of cents."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Amount must be an int of cents, got {type(amount).__name__}")
    if amount <= 0:
        raise ValueError(f"Amount must be positive, got {amount}")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 50 -> '$0.50', -100 -> '-$1.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
