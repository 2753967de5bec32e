from decimal import Decimal, ROUND_HALF_UP

TWOPLACES = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize a number to two decimal places using half-up rounding."""
    return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
