from __future__ import annotations

from app.schemas.book import BookPayload, validate_book_payload

SEED_BOOKS = [
    {
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "genre": "Fiction",
        "publicationYear": 1925,
        "description": "A classic American novel set in the Jazz Age.",
    },
    {
        "title": "To Kill a Mockingbird",
        "author": "Harper Lee",
        "genre": "Fiction",
        "publicationYear": 1960,
        "description": "A gripping tale of racial injustice and childhood innocence.",
    },
    {
        "title": "1984",
        "author": "George Orwell",
        "genre": "Dystopian Fiction",
        "publicationYear": 1949,
        "description": "A dystopian social science fiction novel about totalitarian control.",
    },
]


def seed_payloads() -> list[BookPayload]:
    return [validate_book_payload(book) for book in SEED_BOOKS]
