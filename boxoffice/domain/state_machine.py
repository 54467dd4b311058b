# boxoffice/domain/state_machine.py

from enum import Enum
from typing import Dict, Set, Tuple

from boxoffice.domain.exceptions import InvalidStateTransitionError


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class OrderStateMachine:
    """
    Central lifecycle controller for order transitions.
    Defines the legal state transitions and which states hold seats.
    """

    _ALLOWED_TRANSITIONS: Dict[OrderStatus, Set[OrderStatus]] = {
        OrderStatus.PENDING: {
            OrderStatus.PAID,
            OrderStatus.CANCELLED,
        },
        OrderStatus.PAID: {
            OrderStatus.CANCELLED,
        },
        OrderStatus.CANCELLED: set(),
    }

    ACTIVE_STATUSES: Tuple[OrderStatus, ...] = (
        OrderStatus.PENDING,
        OrderStatus.PAID,
    )

    @classmethod
    def can_transition(
        cls,
        from_status: OrderStatus,
        to_status: OrderStatus,
    ) -> bool:
        """
        Returns True if transition is allowed.
        """
        cls._ensure_valid_status(from_status)
        cls._ensure_valid_status(to_status)

        return to_status in cls._ALLOWED_TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(
        cls,
        from_status: OrderStatus,
        to_status: OrderStatus,
    ) -> None:
        """
        Raises InvalidStateTransitionError if transition is illegal.
        """
        if not cls.can_transition(from_status, to_status):
            raise InvalidStateTransitionError(
                from_state=from_status.value,
                to_state=to_status.value,
            )

    @classmethod
    def is_terminal(cls, status: OrderStatus) -> bool:
        cls._ensure_valid_status(status)
        return len(cls._ALLOWED_TRANSITIONS.get(status, set())) == 0

    @classmethod
    def holds_seats(cls, status: OrderStatus) -> bool:
        """
        Returns True if claims of an order in this state occupy their seats.
        """
        cls._ensure_valid_status(status)
        return status in cls.ACTIVE_STATUSES

    @staticmethod
    def _ensure_valid_status(status: OrderStatus) -> None:
        if not isinstance(status, OrderStatus):
            raise TypeError(
                f"Expected OrderStatus, got {type(status)}"
            )
