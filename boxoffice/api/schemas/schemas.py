from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field
from pydantic.alias_generators import to_camel

from boxoffice.domain import pricing
from boxoffice.domain.exceptions import InvalidRequestError
from boxoffice.domain.models import INT_MAX, INT_MIN, Customer, SeatItem


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# -----------------------------
# Orders
# -----------------------------
class CustomerIn(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)


class SeatIn(CamelModel):
    row: int = Field(ge=INT_MIN, le=INT_MAX)
    col: int = Field(ge=INT_MIN, le=INT_MAX)


class OrderItemIn(CamelModel):
    session_id: int = Field(ge=INT_MIN, le=INT_MAX)
    seat: SeatIn
    price: int = Field(default=0, ge=0, le=INT_MAX)


class PlaceOrderRequest(CamelModel):
    customer: CustomerIn
    items: List[OrderItemIn] = Field(min_length=1)
    payment: Optional[str] = None
    promo_code: Optional[str] = None

    def to_customer(self) -> Customer:
        return Customer(
            name=self.customer.name,
            email=self.customer.email,
            phone=self.customer.phone,
        )

    def to_items(self) -> List[SeatItem]:
        return [
            SeatItem(
                session_id=item.session_id,
                row=item.seat.row,
                col=item.seat.col,
                price=item.price,
            )
            for item in self.items
        ]


def parse_order_request(body: Any) -> PlaceOrderRequest:
    """
    Converts a loosely-typed request body into a typed order request.
    Any shape problem becomes InvalidRequestError.
    """
    if not isinstance(body, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    items = body.get("items")
    if not isinstance(items, list) or len(items) == 0:
        raise InvalidRequestError("No items")
    customer = body.get("customer")
    if not isinstance(customer, dict) or not all(
        isinstance(customer.get(key), str) and customer.get(key).strip()
        for key in ("name", "email", "phone")
    ):
        raise InvalidRequestError("Invalid customer")

    try:
        return PlaceOrderRequest.model_validate(body)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise InvalidRequestError(f"Invalid order request: {problems}") from exc


class PlaceOrderResponse(CamelModel):
    ok: bool = True
    order_id: str
    total: int


class TicketOut(CamelModel):
    session_id: int
    row: int
    col: int
    price: int


class OrderOut(CamelModel):
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
    tickets: List[TicketOut]


# -----------------------------
# Promotions
# -----------------------------
class PromoOut(CamelModel):
    code: str
    discount_percent: int
    valid_until: Optional[str] = None


class PromoApplyResponse(CamelModel):
    ok: bool = True
    promo: Optional[PromoOut] = None


# -----------------------------
# Catalog
# -----------------------------
class PerformerOut(CamelModel):
    id: int
    name: str
    photo_url: Optional[str] = None
    bio: Optional[str] = None


class VenueOut(CamelModel):
    id: int
    name: str
    city: Optional[str] = None
    address: Optional[str] = None
    seating_map: Any = None


class SessionOut(CamelModel):
    id: int
    event_id: int
    date: str
    time: str
    base_price: int
    dynamic_multiplier: float

    @computed_field(alias="listPrice")
    @property
    def list_price(self) -> int:
        return pricing.list_price(self.base_price, self.dynamic_multiplier)


class EventOut(CamelModel):
    id: int
    title: str
    poster_url: Optional[str] = None
    description: Optional[str] = None
    duration_min: Optional[int] = None
    rating: float
    popularity: int
    venue_id: int
    genres: List[str]
    cast_ids: List[int]
    sessions: List[SessionOut]


class SeatOut(CamelModel):
    row: int
    col: int


class OccupancyOut(CamelModel):
    session_id: int
    seats: List[SeatOut]
