import logging
from typing import Any, Callable, List

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status
from sqlalchemy.orm import sessionmaker

from boxoffice.api.schemas.schemas import (
    EventOut,
    OccupancyOut,
    OrderOut,
    PerformerOut,
    PlaceOrderResponse,
    PromoApplyResponse,
    PromoOut,
    SeatOut,
    SessionOut,
    TicketOut,
    VenueOut,
    parse_order_request,
)
from boxoffice.application.booking_service import BookingService
from boxoffice.application.catalog_service import CatalogService
from boxoffice.application.order_service import OrderQueryService
from boxoffice.domain.exceptions import (
    BoxOfficeError,
    InvalidRequestError,
    NotFoundError,
    SeatConflictError,
    StoreUnavailableError,
)
from boxoffice.domain.models import INT_MAX, INT_MIN
from boxoffice.domain.timestamps import utc_now_iso
from boxoffice.infrastructure.db.session import SessionLocal


router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)


def get_session_factory() -> sessionmaker:
    return SessionLocal


def get_clock() -> Callable[[], str]:
    return utc_now_iso


def get_booking_service(
    session_factory: sessionmaker = Depends(get_session_factory),
    clock: Callable[[], str] = Depends(get_clock),
) -> BookingService:
    return BookingService(session_factory, clock=clock)


def get_order_query_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> OrderQueryService:
    return OrderQueryService(session_factory)


def get_catalog_service(
    session_factory: sessionmaker = Depends(get_session_factory),
    clock: Callable[[], str] = Depends(get_clock),
) -> CatalogService:
    return CatalogService(session_factory, clock=clock)


def _to_http_error(exc: BoxOfficeError) -> HTTPException:
    if isinstance(exc, SeatConflictError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": str(exc),
                "sessionId": exc.session_id,
                "row": exc.row,
                "col": exc.col,
            },
        )
    if isinstance(exc, InvalidRequestError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, StoreUnavailableError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    logger.error("Unmapped domain error: %s", exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error")


@router.get("/health")
def health():
    return {"ok": True}


# -----------------------------
# Catalog
# -----------------------------
@router.get("/performers", response_model=List[PerformerOut])
def list_performers(service: CatalogService = Depends(get_catalog_service)):
    try:
        performers = service.list_performers()
    except BoxOfficeError as exc:
        raise _to_http_error(exc) from exc
    return [PerformerOut.model_validate(item) for item in performers]


@router.get("/venues", response_model=List[VenueOut])
def list_venues(service: CatalogService = Depends(get_catalog_service)):
    try:
        venues = service.list_venues()
    except BoxOfficeError as exc:
        raise _to_http_error(exc) from exc
    return [VenueOut.model_validate(item) for item in venues]


@router.get("/events", response_model=List[EventOut])
def list_events(service: CatalogService = Depends(get_catalog_service)):
    try:
        events = service.list_events()
    except BoxOfficeError as exc:
        raise _to_http_error(exc) from exc
    return [EventOut.model_validate(item) for item in events]


@router.get("/events/{event_id}", response_model=EventOut)
def get_event(
    event_id: int = Path(ge=INT_MIN, le=INT_MAX),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        event = service.get_event(event_id)
    except BoxOfficeError as exc:
        raise _to_http_error(exc) from exc
    return EventOut.model_validate(event)


@router.get("/events/{event_id}/sessions", response_model=List[SessionOut])
def list_sessions(
    event_id: int = Path(ge=INT_MIN, le=INT_MAX),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        sessions = service.list_sessions(event_id)
    except BoxOfficeError as exc:
        raise _to_http_error(exc) from exc
    return [SessionOut.model_validate(item) for item in sessions]


@router.get("/sessions/{session_id}", response_model=SessionOut)
def get_session(
    session_id: int = Path(ge=INT_MIN, le=INT_MAX),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        session = service.get_session(session_id)
        if session is None:
            raise NotFoundError("Session not found")
    except BoxOfficeError as exc:
        raise _to_http_error(exc) from exc
    return SessionOut.model_validate(session)


@router.get("/sessions/{session_id}/occupied", response_model=OccupancyOut)
def occupied_seats(
    session_id: int = Path(ge=INT_MIN, le=INT_MAX),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        seats = service.occupied_seats(session_id)
    except BoxOfficeError as exc:
        raise _to_http_error(exc) from exc
    return OccupancyOut(
        session_id=session_id,
        seats=[SeatOut(row=row, col=col) for row, col in seats],
    )


@router.post("/promo/apply", response_model=PromoApplyResponse)
def apply_promo(
    body: Any = Body(default=None),
    service: CatalogService = Depends(get_catalog_service),
):
    code = body.get("code") if isinstance(body, dict) else None
    try:
        promo = service.preview_promo(code if isinstance(code, str) else None)
    except BoxOfficeError as exc:
        raise _to_http_error(exc) from exc
    if promo is None:
        return PromoApplyResponse(promo=None)
    return PromoApplyResponse(
        promo=PromoOut(
            code=promo.code,
            discount_percent=promo.discount_percent,
            valid_until=promo.valid_until,
        )
    )


# -----------------------------
# Orders
# -----------------------------
@router.post("/orders", response_model=PlaceOrderResponse)
def place_order(
    body: Any = Body(default=None),
    service: BookingService = Depends(get_booking_service),
):
    try:
        request = parse_order_request(body)
        placed = service.place_order(
            customer=request.to_customer(),
            items=request.to_items(),
            payment_label=request.payment,
            promo_code=request.promo_code,
        )
    except BoxOfficeError as exc:
        raise _to_http_error(exc) from exc

    return PlaceOrderResponse(order_id=placed.order_id, total=placed.total)


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    service: OrderQueryService = Depends(get_order_query_service),
):
    try:
        order = service.get_order(order_id)
    except BoxOfficeError as exc:
        raise _to_http_error(exc) from exc

    return OrderOut(
        id=order.id,
        name=order.name,
        email=order.email,
        phone=order.phone,
        payment=order.payment,
        subtotal=order.subtotal,
        discount=order.discount,
        total=order.total,
        status=order.status,
        created_at=order.created_at,
        tickets=[
            TicketOut(
                session_id=ticket.session_id,
                row=ticket.row,
                col=ticket.col,
                price=ticket.price,
            )
            for ticket in order.tickets
        ],
    )
