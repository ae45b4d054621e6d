from decimal import Decimal, ROUND_HALF_UP, getcontext
from typing import List

getcontext().prec = 28
CENTS = Decimal("0.01")
TOLERANCE = Decimal("0.01")


def qround(d: Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from dragging in binary noise
    return Decimal(str(value))


def split_equally(amount: Decimal, parts: int) -> List[Decimal]:
    """
    Split `amount` into `parts` cent-rounded shares that add up exactly.

    Leftover cents go to the first shares, so split_equally(100, 3)
    gives [33.34, 33.33, 33.33].
    """
    if parts <= 0:
        raise ValueError("parts must be positive")

    total_cents = int(qround(to_decimal(amount)) / CENTS)
    base, remainder = divmod(total_cents, parts)

    return [
        (Decimal(base + (1 if i < remainder else 0)) * CENTS)
        for i in range(parts)
    ]
