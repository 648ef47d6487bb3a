from __future__ import annotations

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.book_service import get_book_store
from app.stores import InMemoryBookStore, seed_payloads


@pytest.fixture()
def store() -> InMemoryBookStore:
    return InMemoryBookStore(seed=seed_payloads())


@pytest.fixture()
def client(store: InMemoryBookStore):
    app.dependency_overrides[get_book_store] = lambda: store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _payload(**overrides):
    payload = {
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Science Fiction",
        "publicationYear": 1965,
        "description": "Spice, sandworms and the politics of Arrakis.",
    }
    payload.update(overrides)
    return payload


def test_list_books_returns_seed_in_insertion_order(client: TestClient):
    response = client.get("/api/books")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 3
    assert [book["id"] for book in body["data"]] == [1, 2, 3]
    assert body["data"][2]["genre"] == "Dystopian Fiction"


def test_record_shape_uses_camel_case_fields(client: TestClient):
    book = client.get("/api/books/1").json()["data"]
    assert set(book) == {
        "id",
        "title",
        "author",
        "genre",
        "publicationYear",
        "description",
        "createdAt",
        "updatedAt",
    }
    assert book["publicationYear"] == 1925


def test_get_missing_or_malformed_id_is_not_found(client: TestClient):
    for book_id in ("999", "abc", "0", "-1"):
        response = client.get(f"/api/books/{book_id}")
        assert response.status_code == 404
        body = response.json()
        assert body == {"success": False, "message": "Book not found", "code": "book_not_found"}


def test_create_then_get_round_trip(client: TestClient):
    created = client.post("/api/books", json=_payload())
    assert created.status_code == 201
    body = created.json()
    assert body["success"] is True
    assert body["message"] == "Book created successfully"
    book = body["data"]
    assert book["id"] == 4
    assert book["createdAt"] == book["updatedAt"]

    fetched = client.get(f"/api/books/{book['id']}").json()["data"]
    assert fetched == book
    for field, value in _payload().items():
        assert fetched[field] == value


def test_create_trims_text_fields(client: TestClient):
    response = client.post(
        "/api/books",
        json=_payload(title="  Dune  ", author=" Frank Herbert ", genre=" Science Fiction "),
    )
    assert response.status_code == 201
    book = response.json()["data"]
    assert book["title"] == "Dune"
    assert book["author"] == "Frank Herbert"
    assert book["genre"] == "Science Fiction"


def test_ids_are_never_reused(client: TestClient):
    assert client.post("/api/books", json=_payload()).json()["data"]["id"] == 4
    assert client.delete("/api/books/2").status_code == 200

    response = client.post("/api/books", json=_payload(title="Dune Messiah"))
    assert response.json()["data"]["id"] == 5


def test_create_duplicate_title_author_case_insensitive_conflicts(client: TestClient):
    response = client.post(
        "/api/books",
        json=_payload(title="THE GREAT GATSBY", author="f. scott fitzgerald"),
    )
    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "book_exists"
    assert body["message"] == "A book with this title and author already exists"
    assert client.get("/api/books").json()["count"] == 3


def test_create_same_title_different_author_succeeds(client: TestClient):
    same_title = client.post("/api/books", json=_payload(title="The Great Gatsby", author="Someone Else"))
    same_author = client.post("/api/books", json=_payload(title="Tender Is the Night", author="F. Scott Fitzgerald"))
    assert same_title.status_code == 201
    assert same_author.status_code == 201


def test_create_validation_failure_lists_every_field(client: TestClient):
    response = client.post(
        "/api/books",
        json={"title": "   ", "author": "x" * 101, "genre": "Poetry", "publicationYear": 999},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert body["code"] == "validation_failed"
    messages = {error["field"]: error["message"] for error in body["errors"]}
    assert messages["title"] == "Title is required"
    assert messages["author"] == "Author must be between 1 and 100 characters"
    assert messages["genre"] == "Invalid genre"
    assert messages["publicationYear"].startswith("Publication year must be between 1000 and ")
    assert messages["description"] == "Description is required"
    assert client.get("/api/books").json()["count"] == 3


def test_malformed_json_body_is_a_validation_failure(client: TestClient):
    response = client.post(
        "/api/books",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "validation_failed"
    assert body["errors"][0]["field"] == "body"


def test_update_replaces_fields_and_keeps_identity(client: TestClient):
    before = client.get("/api/books/1").json()["data"]

    response = client.put(
        "/api/books/1",
        json=_payload(title="The Great Gatsby", author="F. Scott Fitzgerald", genre="Fiction"),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Book updated successfully"
    after = body["data"]
    assert after["id"] == 1
    assert after["createdAt"] == before["createdAt"]
    assert after["description"] == _payload()["description"]
    assert _ts(after["updatedAt"]) > _ts(before["updatedAt"])
    assert _ts(after["updatedAt"]) >= _ts(after["createdAt"])


def test_update_ignores_echoed_read_only_fields(client: TestClient):
    before = client.get("/api/books/3").json()["data"]
    payload = dict(before, id=77, createdAt="2000-01-01T00:00:00Z", description="Big Brother is watching.")

    after = client.put("/api/books/3", json=payload).json()["data"]
    assert after["id"] == 3
    assert after["createdAt"] == before["createdAt"]
    assert after["description"] == "Big Brother is watching."


def test_update_colliding_with_other_book_conflicts(client: TestClient):
    response = client.put(
        "/api/books/2",
        json=_payload(title="1984", author="GEORGE ORWELL"),
    )
    assert response.status_code == 409
    assert client.get("/api/books/2").json()["data"]["title"] == "To Kill a Mockingbird"


def test_update_missing_book_is_not_found(client: TestClient):
    response = client.put("/api/books/42", json=_payload())
    assert response.status_code == 404
    assert response.json()["code"] == "book_not_found"


def test_update_with_invalid_payload_is_rejected_before_lookup(client: TestClient):
    response = client.put("/api/books/42", json=_payload(genre="Cookbook"))
    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "genre", "message": "Invalid genre"}]


def test_delete_returns_removed_book_and_hides_it(client: TestClient):
    response = client.delete("/api/books/2")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Book deleted successfully"
    assert body["data"]["title"] == "To Kill a Mockingbird"

    assert client.get("/api/books/2").status_code == 404
    assert [book["id"] for book in client.get("/api/books").json()["data"]] == [1, 3]
    assert client.get("/api/books/search/mockingbird").json()["count"] == 0
    assert client.delete("/api/books/2").status_code == 404


def test_search_matches_description_case_insensitively(client: TestClient):
    response = client.get("/api/books/search/JaZz AgE")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 1
    assert body["data"][0]["id"] == 1
    assert body["query"] == "JaZz AgE"


def test_search_matches_genre_and_keeps_insertion_order(client: TestClient):
    body = client.get("/api/books/search/fiction").json()
    assert [book["id"] for book in body["data"]] == [1, 2, 3]
    assert body["count"] == 3


def test_search_lists_a_book_once_when_several_fields_match(client: TestClient):
    client.post(
        "/api/books",
        json=_payload(title="Orwell", author="Orwell Fan", description="All about Orwell."),
    )
    body = client.get("/api/books/search/orwell").json()
    assert [book["id"] for book in body["data"]] == [3, 4]


def test_search_without_matches_is_empty_success(client: TestClient):
    response = client.get("/api/books/search/zzzz-no-such-book")
    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["count"] == 0


@pytest.mark.parametrize("path", ["/api/books/search/", "/api/books/search", "/api/books/search/%20%20"])
def test_search_with_empty_query_is_bad_request(client: TestClient, path: str):
    response = client.get(path)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Search query is required"
    assert body["code"] == "search_query_required"
