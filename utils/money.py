from decimal import Decimal, ROUND_HALF_UP

_CENT = Decimal("0.01")


def round_money(amount: float) -> float:
    """
    Round a currency amount to 2 decimal places, halves away from zero.

    Built-in round() uses banker's rounding on binary floats, so 0.125 could
    become 0.12. Going through the decimal string keeps register math stable.

    Examples:
        3.333 → 3.33
        0.125 → 0.13
        7.5   → 7.5
    """
    return float(Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP))


def format_money(amount: float, symbol: str = "₱") -> str:
    """Format an amount for display, e.g. 1234.5 → '₱1,234.50'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(round_money(amount)):,.2f}"
