# tests/api/test_orders_api.py
from inkwell.models.book import Book


def _order(client, headers, *lines):
    return client.post(
        "/api/orders",
        json={"items": [{"book_slug": s, "quantity": q, "price": p} for s, q, p in lines]},
        headers=headers,
    )


def test_orders_require_auth(client):
    assert client.post("/api/orders", json={"items": []}).status_code == 401
    assert client.get("/api/orders").status_code == 401


def test_place_order(client, db_session, test_user, dune, auth_headers):
    headers = auth_headers(test_user)
    client.put("/api/cart", json={"items": [{"slug": "dune", "quantity": 2}, {"slug": "ghost", "quantity": 1}]}, headers=headers)

    response = _order(client, headers, ("dune", 2, 12.99))

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Order placed successfully"
    order = body["order"]
    assert order["order_id"].startswith("ORD-")
    assert order["total"] == 25.98
    assert order["items"] == [{
        "book_slug": "dune",
        "quantity": 2,
        "price": 12.99,
        "title": "Dune",
        "cover_image_url": "/covers/dune.jpg",
        "author": "Frank Herbert",
    }]

    db_session.expire_all()
    assert db_session.get(Book, dune.id).stock == 0
    cart = client.get("/api/cart", headers=headers).json()
    assert [line["slug"] for line in cart["items"]] == ["ghost"]

    response = _order(client, headers, ("dune", 1, 12.99))
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Insufficient stock for book dune"}


def test_order_price_mismatch(client, test_user, dune, auth_headers):
    response = _order(client, auth_headers(test_user), ("dune", 1, 1.99))

    assert response.status_code == 400
    assert response.json()["message"] == "Price mismatch for book dune"


def test_order_unknown_book(client, test_user, auth_headers):
    response = _order(client, auth_headers(test_user), ("ghost", 1, 1.0))

    assert response.status_code == 404
    assert response.json()["message"] == "Book ghost not found"


def test_order_empty_items(client, test_user, auth_headers):
    response = client.post("/api/orders", json={"items": []}, headers=auth_headers(test_user))

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_order_quantity_must_be_positive(client, test_user, dune, auth_headers):
    response = _order(client, auth_headers(test_user), ("dune", 0, 12.99))

    assert response.status_code == 400


def test_order_history(client, test_user, test_user_2, make_book, auth_headers):
    make_book("emma", price="7.50", stock=10, title="Emma")
    headers = auth_headers(test_user)
    first = _order(client, headers, ("emma", 1, 7.5)).json()["order"]
    second = _order(client, headers, ("emma", 2, 7.5)).json()["order"]
    _order(client, auth_headers(test_user_2), ("emma", 1, 7.5))

    response = client.get("/api/orders", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert body["page"] == 1
    assert body["total_pages"] == 1
    assert [o["order_id"] for o in body["orders"]] == [second["order_id"], first["order_id"]]
    assert body["orders"][0]["total"] == 15.0
