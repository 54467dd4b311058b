import os

# Keep the module-level engine off any real database while testing.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from boxoffice.api.routes.routes import get_clock, get_session_factory
from boxoffice.application.booking_service import BookingService
from boxoffice.application.order_service import OrderQueryService
from boxoffice.infrastructure.db.models import (
    Event,
    EventSession,
    Performer,
    Promo,
    Venue,
)
from boxoffice.infrastructure.db.session import (
    Base,
    build_engine,
    build_session_factory,
    unit_of_work,
)
from boxoffice.main import app

FIXED_NOW = "2026-10-19T12:00:00.000Z"


def fixed_clock() -> str:
    return FIXED_NOW


def count_rows(session_factory, model) -> int:
    with unit_of_work(session_factory) as db:
        return db.execute(select(func.count()).select_from(model)).scalar_one()


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'boxoffice.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def catalog(session_factory):
    with unit_of_work(session_factory) as db:
        db.add_all(
            [
                Performer(id=1, name="Anna Petrova", photo_url="/img/1.jpg"),
                Performer(id=2, name="Ivan Sokolov"),
                Venue(id=1, name="Main Stage", city="Moscow", seating_map={"rows": 10, "cols": 14}),
            ]
        )
        db.flush()
        db.add_all(
            [
                Event(
                    id=1,
                    title="The Cherry Orchard",
                    rating=4.8,
                    popularity=90,
                    venue_id=1,
                    genres=["drama"],
                    cast_ids=[1, 2],
                ),
                Event(
                    id=2,
                    title="A Midsummer Night's Dream",
                    rating=4.5,
                    popularity=95,
                    venue_id=1,
                    genres=["comedy"],
                    cast_ids=[2],
                ),
            ]
        )
        db.flush()
        db.add_all(
            [
                EventSession(id=2, event_id=1, date="2026-11-15", time="19:00", base_price=1000, dynamic_multiplier=1.25),
                EventSession(id=1, event_id=1, date="2026-11-14", time="19:00", base_price=1000, dynamic_multiplier=1),
                EventSession(id=3, event_id=2, date="2026-11-20", time="18:30", base_price=800, dynamic_multiplier=1),
                Promo(code="SAVE10", discount_percent=10, valid_until=None),
                Promo(code="Winter15", discount_percent=15, valid_until="2026-12-31T23:59:59.000Z"),
                Promo(code="LASTCALL", discount_percent=50, valid_until=FIXED_NOW),
                Promo(code="EXPIRED", discount_percent=30, valid_until="2026-10-19T11:59:59.999Z"),
                Promo(code="FREE", discount_percent=100, valid_until=None),
            ]
        )


@pytest.fixture
def booking_service(session_factory, catalog):
    return BookingService(session_factory, clock=fixed_clock)


@pytest.fixture
def order_query(session_factory):
    return OrderQueryService(session_factory)


@pytest.fixture
def client(session_factory, catalog):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    yield TestClient(app)
    app.dependency_overrides.clear()
