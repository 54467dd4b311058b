# boxoffice/infrastructure/db/models.py

from typing import Any, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boxoffice.infrastructure.db.session import Base
from boxoffice.domain.state_machine import OrderStatus


class Performer(Base):
    __tablename__ = "performers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    photo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Venue(Base):
    __tablename__ = "venues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    seating_map: Mapped[Any] = mapped_column(JSON, nullable=False, default=dict)


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    poster_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    popularity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    venue_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("venues.id"),
        nullable=False,
    )
    genres: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    cast_ids: Mapped[List[int]] = mapped_column(JSON, nullable=False, default=list)

    sessions: Mapped[List["EventSession"]] = relationship(
        back_populates="event",
        order_by=lambda: [EventSession.date, EventSession.time],
    )


class EventSession(Base):
    """
    One scheduled occurrence of an event.
    Immutable once the catalog is loaded.
    """

    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    event_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("events.id"),
        nullable=False,
    )
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    time: Mapped[str] = mapped_column(String(8), nullable=False)
    base_price: Mapped[int] = mapped_column(Integer, nullable=False)
    dynamic_multiplier: Mapped[float] = mapped_column(Float, nullable=False, default=1)

    event: Mapped[Event] = relationship(back_populates="sessions")

    __table_args__ = (
        CheckConstraint("base_price >= 0", name="ck_session_base_price_nonnegative"),
        CheckConstraint("dynamic_multiplier > 0", name="ck_session_multiplier_positive"),
    )


class Order(Base):
    """
    Order table reflecting domain state.
    Domain controls transitions; the row is written once, fully priced.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(16), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(64), nullable=False)
    payment: Mapped[str] = mapped_column(String(64), nullable=False)
    subtotal: Mapped[int] = mapped_column(Integer, nullable=False)
    discount: Mapped[int] = mapped_column(Integer, nullable=False)
    total: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[OrderStatus] = mapped_column(
        Enum(
            OrderStatus,
            name="order_status",
            values_callable=lambda statuses: [status.value for status in statuses],
        ),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    created_at: Mapped[str] = mapped_column(String(24), nullable=False)

    claims: Mapped[List["SeatClaim"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SeatClaim.id",
    )

    __table_args__ = (
        CheckConstraint("subtotal >= 0", name="ck_order_subtotal_nonnegative"),
        CheckConstraint("discount >= 0", name="ck_order_discount_nonnegative"),
        CheckConstraint("total >= 0", name="ck_order_total_nonnegative"),
    )


class SeatClaim(Base):
    """
    A (session, row, col) bound to an order.
    `active` mirrors whether the owning order holds its seats.
    """

    __tablename__ = "seat_claims"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(
        String(16),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
    )
    session_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("sessions.id"),
        nullable=False,
    )
    seat_row: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_col: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    order: Mapped[Order] = relationship(back_populates="claims")

    __table_args__ = (
        Index(
            "uq_seat_claims_active_seat",
            "session_id",
            "seat_row",
            "seat_col",
            unique=True,
            postgresql_where=text("active"),
            sqlite_where=text("active"),
        ),
        CheckConstraint("price >= 0", name="ck_seat_claim_price_nonnegative"),
    )


class Promo(Base):
    __tablename__ = "promos"

    code: Mapped[str] = mapped_column(String(64), primary_key=True)
    discount_percent: Mapped[int] = mapped_column(Integer, nullable=False)
    valid_until: Mapped[Optional[str]] = mapped_column(String(24), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "discount_percent >= 0 AND discount_percent <= 100",
            name="ck_promo_discount_percent_range",
        ),
    )


Index("uq_promos_code_lower", func.lower(Promo.code), unique=True)
