import logging
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from boxoffice.domain.exceptions import InvalidRequestError, NotFoundError, StoreUnavailableError
from boxoffice.domain.models import PromoSnapshot
from boxoffice.domain.timestamps import utc_now_iso
from boxoffice.infrastructure.db.models import Event, EventSession, Performer, Venue
from boxoffice.infrastructure.db.session import unit_of_work
from boxoffice.infrastructure.repositories.catalog_repository import CatalogRepository
from boxoffice.infrastructure.repositories.occupancy_repository import OccupancyIndex
from boxoffice.infrastructure.repositories.promo_repository import PromotionLookup

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Read paths around the booking core: catalog listings, seat occupancy
    and promo previews. None of these take part in order placement.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        clock: Callable[[], str] = utc_now_iso,
    ):
        self.session_factory = session_factory
        self.clock = clock

    def _read(self, action: str, fn):
        try:
            with unit_of_work(self.session_factory) as db:
                return fn(db)
        except SQLAlchemyError as exc:
            logger.exception("Catalog read failed: %s", action)
            raise StoreUnavailableError() from exc

    def list_performers(self) -> List[Performer]:
        return self._read("performers", lambda db: CatalogRepository(db).list_performers())

    def list_venues(self) -> List[Venue]:
        return self._read("venues", lambda db: CatalogRepository(db).list_venues())

    def list_events(self) -> List[Event]:
        return self._read("events", lambda db: CatalogRepository(db).list_events())

    def get_event(self, event_id: int) -> Event:
        event = self._read("event", lambda db: CatalogRepository(db).get_event(event_id))
        if event is None:
            raise NotFoundError("Event not found")
        return event

    def list_sessions(self, event_id: int) -> List[EventSession]:
        return self._read("sessions", lambda db: CatalogRepository(db).list_sessions(event_id))

    def get_session(self, session_id: int) -> Optional[EventSession]:
        return self._read("session", lambda db: CatalogRepository(db).get_session(session_id))

    def occupied_seats(self, session_id: int) -> List[Tuple[int, int]]:
        return self._read("occupancy", lambda db: OccupancyIndex(db).occupied_seats(session_id))

    def preview_promo(self, code: Optional[str]) -> Optional[PromoSnapshot]:
        if not code or not code.strip():
            raise InvalidRequestError("Missing code")
        as_of = self.clock()
        return self._read("promo", lambda db: PromotionLookup(db).resolve(code.strip(), as_of=as_of))
