import logging
import secrets
from typing import Callable, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from boxoffice.domain import pricing
from boxoffice.domain.exceptions import (
    BoxOfficeError,
    InvalidRequestError,
    SeatConflictError,
    StoreUnavailableError,
)
from boxoffice.domain.models import Customer, PlacedOrder, SeatItem
from boxoffice.domain.state_machine import OrderStateMachine, OrderStatus
from boxoffice.domain.timestamps import utc_now_iso
from boxoffice.infrastructure.db.models import Order
from boxoffice.infrastructure.db.session import unit_of_work
from boxoffice.infrastructure.repositories.catalog_repository import CatalogRepository
from boxoffice.infrastructure.repositories.occupancy_repository import OccupancyIndex
from boxoffice.infrastructure.repositories.order_repository import OrderRepository
from boxoffice.infrastructure.repositories.promo_repository import PromotionLookup

logger = logging.getLogger(__name__)

ORDER_ID_ALPHABET = "23456789ABCDEFGHJKLMNPQRSTUVWXYZ"
ORDER_ID_LENGTH = 10
DEFAULT_PAYMENT_LABEL = "card"


def generate_order_id() -> str:
    return "".join(secrets.choice(ORDER_ID_ALPHABET) for _ in range(ORDER_ID_LENGTH))


class BookingService:
    """
    Places orders. Availability check, pricing and every write of one
    order happen inside a single unit of work: all of it commits or none
    of it does.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        clock: Callable[[], str] = utc_now_iso,
        id_factory: Callable[[], str] = generate_order_id,
    ):
        self.session_factory = session_factory
        self.clock = clock
        self.id_factory = id_factory

    def place_order(
        self,
        customer: Customer,
        items: Sequence[SeatItem],
        payment_label: Optional[str] = None,
        promo_code: Optional[str] = None,
    ) -> PlacedOrder:
        self._validate_request(customer, items)

        try:
            with unit_of_work(self.session_factory) as db:
                placed = self._commit_order(
                    db,
                    customer=customer,
                    items=items,
                    payment_label=payment_label or DEFAULT_PAYMENT_LABEL,
                    promo_code=promo_code,
                )
        except BoxOfficeError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("Order placement failed in the store: %s", exc)
            raise StoreUnavailableError() from exc

        logger.info(
            "Order %s committed: %s seat(s), total=%s",
            placed.order_id,
            len(items),
            placed.total,
        )
        return placed

    def _validate_request(self, customer: Customer, items: Sequence[SeatItem]) -> None:
        if not items:
            raise InvalidRequestError("No items")
        if customer is None or not customer.is_complete():
            raise InvalidRequestError("Invalid customer")

        seen = set()
        for item in items:
            if item.seat_key in seen:
                raise InvalidRequestError(
                    f"Seat requested twice: session {item.session_id} r{item.row}c{item.col}"
                )
            seen.add(item.seat_key)
            if item.price < 0:
                raise InvalidRequestError("Seat price must not be negative")
            if not item.fits_store():
                raise InvalidRequestError(
                    f"Seat item out of range: session {item.session_id} r{item.row}c{item.col}"
                )

    def _commit_order(
        self,
        db: Session,
        customer: Customer,
        items: Sequence[SeatItem],
        payment_label: str,
        promo_code: Optional[str],
    ) -> PlacedOrder:
        catalog = CatalogRepository(db)
        occupancy = OccupancyIndex(db)
        orders = OrderRepository(db)

        known_sessions = catalog.existing_session_ids(item.session_id for item in items)
        for item in items:
            if item.session_id not in known_sessions:
                raise InvalidRequestError(f"Unknown session {item.session_id}")

        for item in items:
            if occupancy.is_occupied(item.session_id, item.row, item.col):
                logger.warning(
                    "Seat conflict: session=%s row=%s col=%s",
                    item.session_id,
                    item.row,
                    item.col,
                )
                raise SeatConflictError(item.session_id, item.row, item.col)

        now = self.clock()
        subtotal = pricing.subtotal_of(items)
        promo = None
        if promo_code:
            promo = PromotionLookup(db).resolve(promo_code, as_of=now)
        discount = pricing.discount_for(subtotal, promo)
        total = pricing.total_of(subtotal, discount)

        order = orders.create_order(
            order_id=self.id_factory(),
            customer=customer,
            payment=payment_label,
            subtotal=subtotal,
            discount=discount,
            total=total,
            created_at=now,
        )
        # Payment is an opaque label, so the order settles before it is written.
        self._transition(orders, order, OrderStatus.PAID)
        db.flush()

        for item in items:
            try:
                orders.add_claim(order, item)
            except IntegrityError as exc:
                # A concurrent order claimed this seat after our check.
                logger.warning(
                    "Seat conflict rejected by store: session=%s row=%s col=%s",
                    item.session_id,
                    item.row,
                    item.col,
                )
                raise SeatConflictError(item.session_id, item.row, item.col) from exc

        return PlacedOrder(order_id=order.id, total=order.total)

    def _transition(
        self,
        orders: OrderRepository,
        order: Order,
        to_status: OrderStatus,
    ) -> None:
        OrderStateMachine.validate_transition(order.status, to_status)
        orders.update_status(order, to_status)
