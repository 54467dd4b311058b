import pytest
from sqlalchemy.exc import IntegrityError

from boxoffice.infrastructure.db.models import Promo
from boxoffice.infrastructure.db.session import unit_of_work
from boxoffice.infrastructure.repositories.promo_repository import PromotionLookup

from conftest import FIXED_NOW


def _resolve(session_factory, code, as_of=FIXED_NOW):
    with unit_of_work(session_factory) as db:
        return PromotionLookup(db).resolve(code, as_of=as_of)


def test_resolve_is_case_insensitive(session_factory, catalog):
    for code in ("WINTER15", "winter15", "Winter15"):
        promo = _resolve(session_factory, code)
        assert promo is not None
        assert promo.code == "Winter15"
        assert promo.discount_percent == 15


def test_promo_without_expiry_is_always_valid(session_factory, catalog):
    promo = _resolve(session_factory, "save10", as_of="2099-01-01T00:00:00.000Z")

    assert promo.discount_percent == 10
    assert promo.valid_until is None


def test_expiry_equal_to_now_is_still_valid(session_factory, catalog):
    promo = _resolve(session_factory, "LASTCALL")

    assert promo is not None
    assert promo.valid_until == FIXED_NOW


def test_expiry_strictly_before_now_is_inapplicable(session_factory, catalog):
    assert _resolve(session_factory, "EXPIRED") is None
    assert _resolve(session_factory, "LASTCALL", as_of="2026-10-19T12:00:00.001Z") is None


def test_unknown_code_resolves_to_none(session_factory, catalog):
    assert _resolve(session_factory, "NOPE") is None


def test_store_rejects_case_variant_of_existing_code(session_factory, catalog):
    with pytest.raises(IntegrityError):
        with unit_of_work(session_factory) as db:
            db.add(Promo(code="save10", discount_percent=90))

    assert _resolve(session_factory, "SAVE10").discount_percent == 10


def test_resolve_folds_non_ascii_codes(session_factory, catalog):
    with unit_of_work(session_factory) as db:
        db.add(Promo(code="ÉTÉ10", discount_percent=10))

    promo = _resolve(session_factory, "été10")

    assert promo is not None
    assert promo.code == "ÉTÉ10"
