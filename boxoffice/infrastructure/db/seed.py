# boxoffice/infrastructure/db/seed.py

import json
import logging
from pathlib import Path
from typing import Any, List

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from boxoffice.domain.state_machine import OrderStatus
from boxoffice.domain.timestamps import normalize_iso, utc_now_iso
from boxoffice.infrastructure.db.models import (
    Event,
    EventSession,
    Order,
    Performer,
    Promo,
    SeatClaim,
    Venue,
)
from boxoffice.infrastructure.db.session import Base, unit_of_work

logger = logging.getLogger(__name__)

SEED_SEAT_PRICE = 1000


def _read_json(data_dir: Path, name: str) -> List[Any]:
    path = data_dir / name
    if not path.exists():
        logger.warning("Seed file %s not found, loading nothing from it", path)
        return []
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def schema_ready(engine: Engine) -> bool:
    existing = set(inspect(engine).get_table_names())
    return all(name in existing for name in Base.metadata.tables)


def reset_schema(engine: Engine) -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def load_performers(db: Session, performers: List[dict]) -> None:
    for item in performers:
        db.add(
            Performer(
                id=item["id"],
                name=item.get("name") or f"Performer #{item['id']}",
                photo_url=item.get("photoUrl") or item.get("avatarUrl"),
                bio=item.get("bio"),
            )
        )


def load_venues(db: Session, venues: List[dict]) -> None:
    for item in venues:
        db.add(
            Venue(
                id=item["id"],
                name=item["name"],
                city=item.get("city"),
                address=item.get("address"),
                seating_map=item.get("seatingMap") or {},
            )
        )


def load_events(db: Session, shows: List[dict]) -> None:
    for item in shows:
        db.add(
            Event(
                id=item["id"],
                title=item["title"],
                poster_url=item.get("posterUrl"),
                description=item.get("description"),
                duration_min=item.get("durationMin"),
                rating=item.get("rating") or 0,
                popularity=item.get("popularity") or 0,
                venue_id=item["venueId"],
                genres=item.get("genres") or [],
                cast_ids=item.get("cast") or [],
            )
        )
        for session in item.get("sessions") or []:
            db.add(
                EventSession(
                    id=session["id"],
                    event_id=item["id"],
                    date=session["dateISO"],
                    time=session["timeISO"],
                    base_price=session.get("basePrice") or 0,
                    dynamic_multiplier=session.get("dynamicFactor") or 1,
                )
            )


def load_occupied_seats(db: Session, occupied: List[dict]) -> None:
    """Pre-sold seats become one paid order per session."""
    created_at = utc_now_iso()
    for entry in occupied:
        seats = entry.get("seats") or []
        if not seats:
            continue

        subtotal = SEED_SEAT_PRICE * len(seats)
        order = Order(
            id=f"SEED{entry['sessionId']}",
            name="Seed",
            email="seed@example.com",
            phone="+0000000",
            payment="seed",
            subtotal=subtotal,
            discount=0,
            total=subtotal,
            status=OrderStatus.PAID,
            created_at=created_at,
        )
        order.claims = [
            SeatClaim(
                session_id=entry["sessionId"],
                seat_row=seat["row"],
                seat_col=seat["col"],
                price=SEED_SEAT_PRICE,
                active=True,
            )
            for seat in seats
        ]
        db.add(order)


def load_promos(db: Session, promos: List[dict]) -> None:
    for item in promos:
        valid_until = item.get("validUntilISO")
        db.add(
            Promo(
                code=item["code"],
                discount_percent=item["discountPercent"],
                valid_until=normalize_iso(valid_until) if valid_until else None,
            )
        )


def seed_catalog(
    engine: Engine,
    session_factory: sessionmaker,
    data_dir: Path,
    only_if_missing: bool = False,
) -> bool:
    """
    Rebuilds the schema and loads the catalog from `data_dir`.
    Returns False when `only_if_missing` is set and the schema already exists.
    """
    if only_if_missing and schema_ready(engine):
        logger.info("Tables already exist, skipping seed")
        return False

    logger.info("Creating schema")
    reset_schema(engine)

    data_dir = Path(data_dir)
    with unit_of_work(session_factory) as db:
        logger.info("Loading performers")
        load_performers(db, _read_json(data_dir, "actors.json"))
        logger.info("Loading venues")
        load_venues(db, _read_json(data_dir, "venues.json"))
        db.flush()
        logger.info("Loading events and sessions")
        load_events(db, _read_json(data_dir, "shows.json"))
        db.flush()
        logger.info("Loading occupied seats as paid orders")
        load_occupied_seats(db, _read_json(data_dir, "occupiedSeats.json"))
        logger.info("Loading promos")
        load_promos(db, _read_json(data_dir, "promo.json"))

    logger.info("Seed complete")
    return True
