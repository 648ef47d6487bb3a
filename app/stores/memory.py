from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from app.models.book import Book
from app.schemas.book import BookPayload
from app.stores.base import LockedStore, apply_payload, book_matches


class InMemoryBookStore(LockedStore):
    """Book store held in a process-local list; lost on restart."""

    def __init__(self, seed: Iterable[BookPayload] = (), now: Optional[datetime] = None) -> None:
        super().__init__()
        self._books: list[Book] = []
        self._next_id = 1
        for payload in seed:
            self.add_book(payload, now or datetime.now(timezone.utc))

    def list_books(self) -> list[Book]:
        return list(self._books)

    def get_book(self, book_id: int) -> Optional[Book]:
        for book in self._books:
            if book.id == book_id:
                return book
        return None

    def find_by_title_author(
        self, title: str, author: str, exclude_id: Optional[int] = None
    ) -> Optional[Book]:
        title_key, author_key = title.lower(), author.lower()
        for book in self._books:
            if book.id == exclude_id:
                continue
            if book.title_key == title_key and book.author_key == author_key:
                return book
        return None

    def add_book(self, payload: BookPayload, now: datetime) -> Book:
        with self.transaction():
            book = Book(id=self._next_id, created_at=now, updated_at=now)
            apply_payload(book, payload)
            self._next_id += 1
            self._books.append(book)
            return book

    def replace_book(self, book_id: int, payload: BookPayload, now: datetime) -> Optional[Book]:
        with self.transaction():
            book = self.get_book(book_id)
            if book is None:
                return None
            apply_payload(book, payload)
            book.updated_at = now
            return book

    def remove_book(self, book_id: int) -> Optional[Book]:
        with self.transaction():
            for index, book in enumerate(self._books):
                if book.id == book_id:
                    return self._books.pop(index)
            return None

    def search_books(self, needle: str) -> list[Book]:
        needle = needle.lower()
        return [book for book in self._books if book_matches(book, needle)]
