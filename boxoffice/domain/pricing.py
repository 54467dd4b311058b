# boxoffice/domain/pricing.py

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from boxoffice.domain.models import PromoSnapshot, SeatItem


def subtotal_of(items: Iterable[SeatItem]) -> int:
    return sum(item.price for item in items)


def discount_for(subtotal: int, promo: Optional[PromoSnapshot]) -> int:
    """
    Percentage discount on the subtotal, halves rounded up.
    No promo means no discount.
    """
    if promo is None:
        return 0
    # Integer arithmetic: subtotal and percent are both whole numbers.
    return max(0, (subtotal * promo.discount_percent + 50) // 100)


def total_of(subtotal: int, discount: int) -> int:
    return max(0, subtotal - discount)


def list_price(base_price: int, dynamic_multiplier: float) -> int:
    """Informational per-seat price of a session."""
    amount = Decimal(base_price) * Decimal(str(dynamic_multiplier))
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
