import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.errors import register_error_handlers
from api.routes import authors as authors_router
from api.routes import books as books_router
from api.routes import shelves as shelves_router


@pytest.fixture
def client(session_factory, jacket_storage, monkeypatch):
    for module in (authors_router, books_router, shelves_router):
        monkeypatch.setattr(module, "SessionLocal", session_factory)
    monkeypatch.setattr(books_router.jackets, "storage", jacket_storage)

    app = FastAPI()
    register_error_handlers(app)
    app.include_router(authors_router.router, prefix="/authors")
    app.include_router(shelves_router.router, prefix="/shelves")
    app.include_router(books_router.router, prefix="/books")
    return TestClient(app)


@pytest.fixture
def author_id(client):
    resp = client.post("/authors", json={"firstName": "Ursula", "lastName": "Le Guin"})
    assert resp.status_code == 201
    return resp.json()["id"]


def _book_payload(author_id, **overrides):
    payload = {
        "title": "The Dispossessed",
        "author": author_id,
        "isbn": "9780061054884",
        "date": "1974-05-01",
        "description": "An ambiguous utopia",
    }
    payload.update(overrides)
    return payload


class TestAuthors:
    def test_duplicate_name_conflicts(self, client, author_id):
        resp = client.post("/authors", json={"firstName": "Ursula", "lastName": "Le Guin"})
        assert resp.status_code == 409
        assert resp.json() == {"message": "Author already exists"}

    def test_list_is_paginated(self, client, monkeypatch):
        monkeypatch.setattr(authors_router.settings, "LIST_PER_PAGE", 2)
        for last in ("A", "B", "C"):
            client.post("/authors", json={"firstName": "X", "lastName": last})

        page1 = client.get("/authors").json()
        page2 = client.get("/authors", params={"page": 2}).json()

        assert [a["lastName"] for a in page1["data"]] == ["A", "B"]
        assert page1["meta"] == {"page": 1}
        assert [a["lastName"] for a in page2["data"]] == ["C"]

    def test_missing_field_is_400(self, client):
        resp = client.post("/authors", json={"firstName": "Solo"})
        assert resp.status_code == 400
        assert "lastName" in resp.json()["message"]

    def test_update_and_delete(self, client, author_id):
        resp = client.put(f"/authors/{author_id}", json={"firstName": "U. K.", "lastName": "Le Guin"})
        assert resp.status_code == 200
        assert resp.json()["firstName"] == "U. K."

        assert client.delete(f"/authors/{author_id}").status_code == 200
        assert client.get(f"/authors/{author_id}").status_code == 404

    def test_cannot_delete_author_with_books(self, client, author_id):
        client.post("/books", json=_book_payload(author_id))
        assert client.delete(f"/authors/{author_id}").status_code == 409


class TestShelves:
    def test_create_trims_name_and_rejects_duplicates(self, client):
        resp = client.post("/shelves", json={"name": "  Sci-Fi  ", "location": "kube1"})
        assert resp.status_code == 201
        assert resp.json()["name"] == "Sci-Fi"

        assert client.post("/shelves", json={"name": "Sci-Fi"}).status_code == 409

    def test_blank_name(self, client):
        resp = client.post("/shelves", json={"name": "   "})
        assert resp.status_code == 400
        assert resp.json() == {"message": "Shelf name is required"}

    def test_cannot_delete_shelf_with_books(self, client, author_id):
        shelf_id = client.post("/shelves", json={"name": "Fantasy"}).json()["id"]
        client.post("/books", json=_book_payload(author_id, shelf=shelf_id))

        resp = client.delete(f"/shelves/{shelf_id}")
        assert resp.status_code == 409
        assert resp.json() == {"message": "Cannot delete shelf: it contains books"}


class TestBooks:
    def test_create_and_get(self, client, author_id):
        resp = client.post("/books", json=_book_payload(author_id))
        assert resp.status_code == 201
        book = resp.json()
        assert book["jacket"] is None
        assert book["date"] == "1974-05-01"

        fetched = client.get(f"/books/{book['id']}").json()
        assert fetched == book
        assert [b["id"] for b in client.get("/books").json()] == [book["id"]]

    def test_unknown_author(self, client):
        resp = client.post("/books", json=_book_payload("ghost"))
        assert resp.status_code == 400
        assert resp.json() == {"message": "Author does not exist"}

    def test_duplicate_isbn(self, client, author_id):
        client.post("/books", json=_book_payload(author_id))
        resp = client.post("/books", json=_book_payload(author_id, title="Another"))
        assert resp.status_code == 409

    def test_put_rejects_jacket(self, client, author_id):
        book_id = client.post("/books", json=_book_payload(author_id)).json()["id"]
        resp = client.put(f"/books/{book_id}", json=_book_payload(author_id, jacket="jacket_x_1"))
        assert resp.status_code == 400
        assert "read-only" in resp.json()["message"]

    def test_put_updates_fields(self, client, author_id):
        book_id = client.post("/books", json=_book_payload(author_id)).json()["id"]
        resp = client.put(f"/books/{book_id}", json=_book_payload(author_id, title="The Dispossessed (2nd ed.)"))
        assert resp.status_code == 200
        assert resp.json()["title"] == "The Dispossessed (2nd ed.)"

    def test_unknown_book(self, client):
        resp = client.get("/books/nope")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Book not found"}
