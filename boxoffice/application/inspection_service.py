import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Table, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from boxoffice.domain.exceptions import NotFoundError, StoreUnavailableError
from boxoffice.infrastructure.db.session import Base, unit_of_work

# Registers every mapped table on Base.metadata.
import boxoffice.infrastructure.db.models  # noqa: F401

logger = logging.getLogger(__name__)

ROW_LIMIT = 200


class InspectionService:
    """
    Read-only inspection of the service's own tables.

    Table names are resolved against the mapped metadata; nothing the
    caller sends is ever placed into query text.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory

    @staticmethod
    def allowed_tables() -> List[str]:
        return sorted(Base.metadata.tables)

    def _table(self, name: str) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise NotFoundError("Table not found")
        return table

    def table_counts(self) -> List[Tuple[str, int]]:
        try:
            with unit_of_work(self.session_factory) as db:
                return [
                    (name, db.execute(select(func.count()).select_from(self._table(name))).scalar_one())
                    for name in self.allowed_tables()
                ]
        except SQLAlchemyError as exc:
            logger.exception("Inspection count failed")
            raise StoreUnavailableError() from exc

    def table_rows(self, name: str, limit: int = ROW_LIMIT) -> Tuple[List[str], List[Dict[str, Any]]]:
        table = self._table(name)
        columns = [column.name for column in table.columns]
        stmt = (
            select(table)
            .order_by(*table.primary_key.columns)
            .limit(max(1, min(limit, ROW_LIMIT)))
        )
        try:
            with unit_of_work(self.session_factory) as db:
                rows = [dict(row._mapping) for row in db.execute(stmt).all()]
        except SQLAlchemyError as exc:
            logger.exception("Inspection read failed for table %s", name)
            raise StoreUnavailableError() from exc
        return columns, rows
