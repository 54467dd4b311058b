import pytest

from boxoffice.application.catalog_service import CatalogService
from boxoffice.domain.exceptions import InvalidRequestError, NotFoundError
from boxoffice.domain.models import Customer, SeatItem

from conftest import fixed_clock


@pytest.fixture
def catalog_service(session_factory, catalog):
    return CatalogService(session_factory, clock=fixed_clock)


def test_events_ordered_by_popularity_then_rating(catalog_service):
    events = catalog_service.list_events()

    assert [event.id for event in events] == [2, 1]


def test_event_sessions_ordered_by_date_and_time(catalog_service):
    event = catalog_service.get_event(1)

    assert [session.id for session in event.sessions] == [1, 2]


def test_unknown_event_is_not_found(catalog_service):
    with pytest.raises(NotFoundError):
        catalog_service.get_event(404)


def test_list_sessions_for_event(catalog_service):
    sessions = catalog_service.list_sessions(1)

    assert [(s.id, s.date, s.time) for s in sessions] == [
        (1, "2026-11-14", "19:00"),
        (2, "2026-11-15", "19:00"),
    ]
    assert catalog_service.list_sessions(404) == []


def test_get_session(catalog_service):
    session = catalog_service.get_session(2)

    assert session.base_price == 1000
    assert session.dynamic_multiplier == 1.25
    assert catalog_service.get_session(404) is None


def test_performers_and_venues_listed_by_id(catalog_service):
    assert [p.name for p in catalog_service.list_performers()] == ["Anna Petrova", "Ivan Sokolov"]
    assert [v.name for v in catalog_service.list_venues()] == ["Main Stage"]


def test_occupied_seats_reflect_committed_orders(catalog_service, booking_service):
    assert catalog_service.occupied_seats(1) == []

    booking_service.place_order(
        Customer(name="Olga", email="olga@example.com", phone="+7000111"),
        [
            SeatItem(session_id=1, row=2, col=4, price=1000),
            SeatItem(session_id=1, row=2, col=3, price=1000),
            SeatItem(session_id=3, row=1, col=1, price=800),
        ],
    )

    assert catalog_service.occupied_seats(1) == [(2, 3), (2, 4)]
    assert catalog_service.occupied_seats(3) == [(1, 1)]
    assert catalog_service.occupied_seats(2) == []


def test_preview_promo(catalog_service):
    assert catalog_service.preview_promo("save10").discount_percent == 10
    assert catalog_service.preview_promo("EXPIRED") is None


@pytest.mark.parametrize("code", [None, "", "   "])
def test_preview_promo_requires_code(catalog_service, code):
    with pytest.raises(InvalidRequestError):
        catalog_service.preview_promo(code)
