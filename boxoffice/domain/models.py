# boxoffice/domain/models.py

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Bounds of the store's INTEGER columns.
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


@dataclass(frozen=True)
class Customer:
    name: str
    email: str
    phone: str

    def is_complete(self) -> bool:
        return all(
            isinstance(value, str) and value.strip()
            for value in (self.name, self.email, self.phone)
        )


@dataclass(frozen=True)
class SeatItem:
    """One requested seat and the price the caller charges for it."""

    session_id: int
    row: int
    col: int
    price: int

    @property
    def seat_key(self) -> Tuple[int, int, int]:
        return (self.session_id, self.row, self.col)

    def fits_store(self) -> bool:
        return all(INT_MIN <= value <= INT_MAX for value in (self.session_id, self.row, self.col, self.price))


@dataclass(frozen=True)
class PlacedOrder:
    order_id: str
    total: int


@dataclass(frozen=True)
class PromoSnapshot:
    code: str
    discount_percent: int
    valid_until: Optional[str] = None


@dataclass(frozen=True)
class ClaimSnapshot:
    session_id: int
    row: int
    col: int
    price: int


@dataclass(frozen=True)
class OrderSnapshot:
    """Read-side view of a committed order and its seat claims."""

    id: str
    name: str
    email: str
    phone: str
    payment: str
    subtotal: int
    discount: int
    total: int
    status: str
    created_at: str
    tickets: List[ClaimSnapshot] = field(default_factory=list)
