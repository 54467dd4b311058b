# boxoffice/infrastructure/repositories/order_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from boxoffice.domain.models import Customer, SeatItem
from boxoffice.domain.state_machine import OrderStateMachine, OrderStatus
from boxoffice.infrastructure.db.models import Order, SeatClaim


class OrderRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(
        self,
        order_id: str,
    ) -> Order | None:

        stmt = (
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.claims))
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create_order(
        self,
        order_id: str,
        customer: Customer,
        payment: str,
        subtotal: int,
        discount: int,
        total: int,
        created_at: str,
    ) -> Order:

        order = Order(
            id=order_id,
            name=customer.name,
            email=customer.email,
            phone=customer.phone,
            payment=payment,
            subtotal=subtotal,
            discount=discount,
            total=total,
            status=OrderStatus.PENDING,
            created_at=created_at,
        )
        self.db.add(order)
        return order

    def update_status(
        self,
        order: Order,
        new_status: OrderStatus,
    ) -> None:

        order.status = new_status

    def add_claim(self, order: Order, item: SeatItem) -> SeatClaim:
        """
        Writes one seat claim and flushes it, so a uniqueness violation
        surfaces here for this exact seat.
        """
        claim = SeatClaim(
            order_id=order.id,
            session_id=item.session_id,
            seat_row=item.row,
            seat_col=item.col,
            price=item.price,
            active=OrderStateMachine.holds_seats(order.status),
        )
        self.db.add(claim)
        self.db.flush()
        return claim
