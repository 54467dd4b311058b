from boxoffice.api.routes.routes import _to_http_error
from boxoffice.domain.exceptions import InvalidStateTransitionError

ORDER = {
    "customer": {"name": "Olga", "email": "olga@example.com", "phone": "+7000111"},
    "items": [
        {"sessionId": 1, "seat": {"row": 2, "col": 3}, "price": 1000},
        {"sessionId": 1, "seat": {"row": 2, "col": 4}, "price": 1000},
    ],
    "payment": "card",
}


def test_booking_flow(client):

    occupied = client.get("/api/sessions/1/occupied")
    assert occupied.status_code == 200
    assert occupied.json() == {"sessionId": 1, "seats": []}

    promo = client.post("/api/promo/apply", json={"code": "save10"})
    assert promo.status_code == 200
    assert promo.json()["promo"]["discountPercent"] == 10

    response = client.post("/api/orders", json={**ORDER, "promoCode": "SAVE10"})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["total"] == 1800
    order_id = body["orderId"]

    order = client.get(f"/api/orders/{order_id}")
    assert order.status_code == 200
    assert order.json()["subtotal"] == 2000
    assert order.json()["discount"] == 200
    assert order.json()["status"] == "paid"
    assert order.json()["tickets"] == [
        {"sessionId": 1, "row": 2, "col": 3, "price": 1000},
        {"sessionId": 1, "row": 2, "col": 4, "price": 1000},
    ]

    occupied = client.get("/api/sessions/1/occupied")
    assert occupied.json()["seats"] == [{"row": 2, "col": 3}, {"row": 2, "col": 4}]


def test_double_booking_is_a_conflict(client):
    assert client.post("/api/orders", json=ORDER).status_code == 200

    retry = client.post(
        "/api/orders",
        json={**ORDER, "items": [{"sessionId": 1, "seat": {"row": 2, "col": 3}, "price": 1000}]},
    )

    assert retry.status_code == 409
    detail = retry.json()["detail"]
    assert (detail["sessionId"], detail["row"], detail["col"]) == (1, 2, 3)


def test_invalid_order_bodies_are_bad_requests(client):
    no_items = client.post("/api/orders", json={**ORDER, "items": []})
    bad_customer = client.post("/api/orders", json={**ORDER, "customer": {"name": "Olga"}})
    bad_shape = client.post(
        "/api/orders",
        json={**ORDER, "items": [{"sessionId": "one", "seat": "A1"}]},
    )
    not_an_object = client.post("/api/orders", json=["nope"])

    assert no_items.status_code == 400
    assert no_items.json()["detail"] == "No items"
    assert bad_customer.status_code == 400
    assert bad_customer.json()["detail"] == "Invalid customer"
    assert bad_shape.status_code == 400
    assert not_an_object.status_code == 400


def test_unknown_order_is_404(client):
    assert client.get("/api/orders/NOSUCHID00").status_code == 404


def test_missing_promo_code_is_400(client):
    assert client.post("/api/promo/apply", json={}).status_code == 400


def test_expired_promo_previews_as_null(client):
    response = client.post("/api/promo/apply", json={"code": "expired"})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "promo": None}


def test_catalog_endpoints(client):
    events = client.get("/api/events").json()
    assert [event["id"] for event in events] == [2, 1]

    event = client.get("/api/events/1").json()
    assert event["title"] == "The Cherry Orchard"
    assert event["castIds"] == [1, 2]
    assert [s["id"] for s in event["sessions"]] == [1, 2]
    assert event["sessions"][1]["listPrice"] == 1250

    assert client.get("/api/events/404").status_code == 404
    assert [s["id"] for s in client.get("/api/events/1/sessions").json()] == [1, 2]
    assert client.get("/api/sessions/3").json()["basePrice"] == 800
    assert client.get("/api/sessions/404").status_code == 404
    assert [p["id"] for p in client.get("/api/performers").json()] == [1, 2]
    assert client.get("/api/venues").json()[0]["seatingMap"] == {"rows": 10, "cols": 14}


def test_health(client):
    assert client.get("/api/health").json() == {"ok": True}


def test_oversized_integers_are_rejected_at_the_boundary(client):
    huge_session = client.post(
        "/api/orders",
        json={**ORDER, "items": [{"sessionId": 2**70, "seat": {"row": 1, "col": 1}, "price": 1000}]},
    )
    huge_seat = client.post(
        "/api/orders",
        json={**ORDER, "items": [{"sessionId": 1, "seat": {"row": 2**31, "col": 1}, "price": 1000}]},
    )

    assert huge_session.status_code == 400
    assert huge_seat.status_code == 400
    assert client.get(f"/api/sessions/{2**70}").status_code == 422
    assert client.get(f"/api/sessions/{2**70}/occupied").status_code == 422
    assert client.get(f"/api/events/{2**70}").status_code == 422
    assert client.get(f"/api/sessions/{2**31 - 1}").status_code == 404


def test_unmapped_domain_error_is_a_server_error():
    error = _to_http_error(InvalidStateTransitionError("cancelled", "paid"))

    assert error.status_code == 500
    assert error.detail == "Internal error"
