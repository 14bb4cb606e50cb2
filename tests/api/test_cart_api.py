# tests/api/test_cart_api.py


def _pairs(response):
    return [(line["slug"], line["quantity"]) for line in response.json()["items"]]


def test_cart_requires_auth(client):
    assert client.get("/api/cart").status_code == 401
    assert client.put("/api/cart", json={"items": []}).status_code == 401


def test_put_cart_returns_reconciled_cart(client, test_user, dune, auth_headers):
    headers = auth_headers(test_user)

    response = client.put("/api/cart", json={"items": [
        {"slug": str(dune.id), "quantity": 1},
        {"slug": "ghost-book", "quantity": 2},
        {"slug": "dune", "quantity": 1},
        {"slug": "dropped", "quantity": 0},
    ]}, headers=headers)

    assert response.status_code == 200
    assert _pairs(response) == [("dune", 2), ("ghost-book", 2)]
    dune_line, ghost_line = response.json()["items"]
    assert dune_line["price"] == 12.99
    assert dune_line["author"] == "Frank Herbert"
    assert ghost_line == {
        "slug": "ghost-book",
        "title": "Unknown Title",
        "price": 0.0,
        "cover_image_url": "/placeholder.svg",
        "author": "Unknown Author",
        "quantity": 2,
    }

    response = client.get("/api/cart", headers=headers)
    assert _pairs(response) == [("dune", 2), ("ghost-book", 2)]


def test_put_cart_requires_items_list(client, test_user, auth_headers):
    response = client.put("/api/cart", json={"items": "dune"}, headers=auth_headers(test_user))

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_cart_item_operations(client, test_user, dune, make_book, auth_headers):
    make_book("emma", price="7.50")
    headers = auth_headers(test_user)

    client.post("/api/cart/items", json={"slug": "dune"}, headers=headers)
    response = client.post("/api/cart/items", json={"slug": "emma"}, headers=headers)
    assert _pairs(response) == [("dune", 1), ("emma", 1)]

    response = client.patch("/api/cart/items/emma", json={"quantity": 4}, headers=headers)
    assert _pairs(response) == [("dune", 1), ("emma", 4)]

    response = client.delete("/api/cart/items/dune", headers=headers)
    assert _pairs(response) == [("emma", 4)]

    response = client.delete("/api/cart", headers=headers)
    assert response.json() == {"items": []}


def test_add_unknown_book_to_cart(client, test_user, auth_headers):
    response = client.post("/api/cart/items", json={"slug": "ghost"}, headers=auth_headers(test_user))

    assert response.status_code == 404


def test_patch_item_not_in_cart(client, test_user, dune, auth_headers):
    response = client.patch("/api/cart/items/dune", json={"quantity": 2}, headers=auth_headers(test_user))

    assert response.status_code == 404
