# boxoffice/infrastructure/repositories/promo_repository.py

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from boxoffice.domain.models import PromoSnapshot
from boxoffice.infrastructure.db.models import Promo


class PromotionLookup:

    def __init__(self, db: Session):
        self.db = db

    def get_by_code(self, code: str) -> Optional[Promo]:
        stmt = select(Promo).where(func.lower(Promo.code) == func.lower(code))
        return self.db.execute(stmt).scalars().first()

    def resolve(self, code: str, as_of: str) -> Optional[PromoSnapshot]:
        """
        Applicable promo for `code` at `as_of`, or None.

        Expiry is compared as fixed-format UTC strings; a promo expiring
        exactly at `as_of` still applies.
        """
        promo = self.get_by_code(code)
        if promo is None:
            return None

        if promo.valid_until and promo.valid_until < as_of:
            return None

        return PromoSnapshot(
            code=promo.code,
            discount_percent=promo.discount_percent,
            valid_until=promo.valid_until,
        )
