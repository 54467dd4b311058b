import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from boxoffice.domain.exceptions import NotFoundError, StoreUnavailableError
from boxoffice.domain.models import ClaimSnapshot, OrderSnapshot
from boxoffice.infrastructure.db.models import Order
from boxoffice.infrastructure.db.session import unit_of_work
from boxoffice.infrastructure.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class OrderQueryService:
    """Read path for committed orders."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory

    def get_order(self, order_id: str) -> OrderSnapshot:
        try:
            with unit_of_work(self.session_factory) as db:
                order = OrderRepository(db).get_by_id(order_id)
                if order is None:
                    raise NotFoundError("Order not found")
                return self._snapshot(order)
        except SQLAlchemyError as exc:
            logger.exception("Order lookup failed for %s", order_id)
            raise StoreUnavailableError() from exc

    @staticmethod
    def _snapshot(order: Order) -> OrderSnapshot:
        return OrderSnapshot(
            id=order.id,
            name=order.name,
            email=order.email,
            phone=order.phone,
            payment=order.payment,
            subtotal=order.subtotal,
            discount=order.discount,
            total=order.total,
            status=order.status.value,
            created_at=order.created_at,
            tickets=[
                ClaimSnapshot(
                    session_id=claim.session_id,
                    row=claim.seat_row,
                    col=claim.seat_col,
                    price=claim.price,
                )
                for claim in order.claims
            ],
        )
