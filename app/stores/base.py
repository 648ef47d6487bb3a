from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import datetime
from typing import ContextManager, Iterator, Optional, Protocol

from app.models.book import Book
from app.schemas.book import BookPayload


class BookStore(Protocol):
    """Ordered collection of live book records.

    Implementations assign ids from a counter that never goes backwards and
    keep records in insertion order.
    """

    def transaction(self) -> ContextManager[None]: ...

    def list_books(self) -> list[Book]: ...

    def get_book(self, book_id: int) -> Optional[Book]: ...

    def find_by_title_author(
        self, title: str, author: str, exclude_id: Optional[int] = None
    ) -> Optional[Book]: ...

    def add_book(self, payload: BookPayload, now: datetime) -> Book: ...

    def replace_book(
        self, book_id: int, payload: BookPayload, now: datetime
    ) -> Optional[Book]: ...

    def remove_book(self, book_id: int) -> Optional[Book]: ...

    def search_books(self, needle: str) -> list[Book]: ...


class DuplicateBookError(Exception):
    """Raised by a backend when a write would break (title, author) uniqueness."""


class LockedStore:
    """Mixin giving a store a re-entrant critical section for check-then-write sequences."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield


def apply_payload(book: Book, payload: BookPayload) -> None:
    book.title = payload.title
    book.author = payload.author
    book.title_key = payload.title.lower()
    book.author_key = payload.author.lower()
    book.genre = payload.genre.value
    book.publication_year = payload.publication_year
    book.description = payload.description


def book_matches(book: Book, needle: str) -> bool:
    """True when the lowercased ``needle`` occurs in title, author, genre or description."""
    return (
        needle in book.title.lower()
        or needle in book.author.lower()
        or needle in book.genre.lower()
        or needle in book.description.lower()
    )
