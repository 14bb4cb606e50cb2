# tests/api/test_books_api.py
from inkwell.crud import upsert_review
from inkwell.schemas.review import ReviewCreate


def test_list_books(client, make_book):
    for i in range(3):
        make_book(f"book-{i}", price="9.50")

    response = client.get("/api/books", params={"page": 2, "limit": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["total_pages"] == 2
    assert body["current_page"] == 2
    assert [b["slug"] for b in body["data"]] == ["book-2"]
    assert body["data"][0]["price"] == 9.5
    assert body["data"][0]["author"] == "Frank Herbert"
    assert body["data"][0]["average_rating"] == 0


def test_list_books_rejects_bad_page(client):
    response = client.get("/api/books", params={"page": 0})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_get_book_detail(client, db_session, test_user, dune):
    upsert_review(db_session, ReviewCreate(rating=4, comment="Great"), user_id=test_user.id, book_id=dune.id)

    response = client.get("/api/books/dune")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Dune"
    assert data["author_bio"] == "American science fiction author."
    assert data["average_rating"] == 4.0
    assert data["reviews_number"] == 1
    assert [r["user_name"] for r in data["reviews"]] == ["Paul Atreides"]


def test_get_book_not_found(client):
    response = client.get("/api/books/ghost")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Book ghost not found"}


def test_search_books(client, dune):
    response = client.get("/api/books/search", params={"q": "dune"})
    assert [b["slug"] for b in response.json()["data"]] == ["dune"]

    response = client.get("/api/books/search")
    assert response.status_code == 400
    assert response.json()["message"] == "Query parameter is required"


def test_random_books(client, make_book):
    for i in range(5):
        make_book(f"book-{i}")

    response = client.get("/api/books/random", params={"count": 3})

    assert response.status_code == 200
    assert len(response.json()) == 3


def test_create_book_requires_auth(client, author):
    response = client.post("/api/books", json={"title": "Dune", "author": author.id, "price": 12.99})

    assert response.status_code == 401


def test_create_book(client, test_user, author, auth_headers):
    response = client.post(
        "/api/books",
        json={"title": "Dune Messiah", "author": author.id, "price": 10.99, "stock": 3},
        headers=auth_headers(test_user),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["slug"] == "dune-messiah"
    assert data["price"] == 10.99


def test_create_book_unknown_author(client, test_user, auth_headers):
    response = client.post(
        "/api/books", json={"title": "Orphan", "author": 999, "price": 1}, headers=auth_headers(test_user)
    )

    assert response.status_code == 404


def test_submit_review_via_book(client, test_user, dune, auth_headers):
    headers = auth_headers(test_user)

    response = client.post("/api/books/dune/reviews", json={"rating": 5, "comment": "Classic"}, headers=headers)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Review submitted successfully"
    assert body["review"]["user_id"] == test_user.id
    assert body["average_rating"] == 5.0

    response = client.post("/api/books/dune/reviews", json={"rating": 3}, headers=headers)
    assert response.json()["message"] == "Review updated successfully"
    assert response.json()["average_rating"] == 3.0


def test_submit_review_requires_auth(client, dune):
    response = client.post("/api/books/dune/reviews", json={"rating": 5})

    assert response.status_code == 401
