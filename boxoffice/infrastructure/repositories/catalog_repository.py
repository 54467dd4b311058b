# boxoffice/infrastructure/repositories/catalog_repository.py

from typing import Iterable, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from boxoffice.infrastructure.db.models import Event, EventSession, Performer, Venue


class CatalogRepository:
    """Read-mostly access to performers, venues, events and sessions."""

    def __init__(self, db: Session):
        self.db = db

    def list_performers(self) -> List[Performer]:
        stmt = select(Performer).order_by(Performer.id)
        return list(self.db.execute(stmt).scalars().all())

    def list_venues(self) -> List[Venue]:
        stmt = select(Venue).order_by(Venue.id)
        return list(self.db.execute(stmt).scalars().all())

    def list_events(self) -> List[Event]:
        stmt = (
            select(Event)
            .options(selectinload(Event.sessions))
            .order_by(Event.popularity.desc(), Event.rating.desc(), Event.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_event(self, event_id: int) -> Optional[Event]:
        stmt = (
            select(Event)
            .where(Event.id == event_id)
            .options(selectinload(Event.sessions))
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_sessions(self, event_id: int) -> List[EventSession]:
        stmt = (
            select(EventSession)
            .where(EventSession.event_id == event_id)
            .order_by(EventSession.date, EventSession.time, EventSession.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_session(self, session_id: int) -> Optional[EventSession]:
        return self.db.get(EventSession, session_id)

    def existing_session_ids(self, session_ids: Iterable[int]) -> Set[int]:
        wanted = set(session_ids)
        if not wanted:
            return set()
        stmt = select(EventSession.id).where(EventSession.id.in_(sorted(wanted)))
        return set(self.db.execute(stmt).scalars().all())
