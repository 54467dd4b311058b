# boxoffice/infrastructure/repositories/occupancy_repository.py

from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from boxoffice.domain.state_machine import OrderStateMachine
from boxoffice.infrastructure.db.models import Order, SeatClaim


class OccupancyIndex:
    """
    Live view of claimed seats. Always queried against the caller's
    session so the check runs inside the caller's unit of work.
    """

    def __init__(self, db: Session):
        self.db = db

    def _active_claims(self):
        return (
            select(SeatClaim.seat_row, SeatClaim.seat_col)
            .join(Order, Order.id == SeatClaim.order_id)
            .where(Order.status.in_(OrderStateMachine.ACTIVE_STATUSES))
        )

    def is_occupied(self, session_id: int, row: int, col: int) -> bool:
        stmt = (
            self._active_claims()
            .where(SeatClaim.session_id == session_id)
            .where(SeatClaim.seat_row == row)
            .where(SeatClaim.seat_col == col)
            .limit(1)
        )
        return self.db.execute(stmt).first() is not None

    def occupied_seats(self, session_id: int) -> List[Tuple[int, int]]:
        stmt = (
            self._active_claims()
            .where(SeatClaim.session_id == session_id)
            .order_by(SeatClaim.seat_row, SeatClaim.seat_col)
        )
        return [(row, col) for row, col in self.db.execute(stmt).all()]
