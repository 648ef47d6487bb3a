from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from fastapi import Depends, Request

from app.core.errors import BookConflictError, BookNotFoundError, MalformedRequestError
from app.core.logging import get_logger
from app.models.book import Book
from app.schemas.book import validate_book_payload
from app.stores import BookStore, DuplicateBookError

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _parse_book_id(book_id: Any) -> Optional[int]:
    if isinstance(book_id, bool):
        return None
    if isinstance(book_id, int):
        return book_id if book_id > 0 else None
    text = str(book_id).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    value = int(text)
    return value if value > 0 else None


class BookService:
    """Business rules for book records: existence, uniqueness, timestamps."""

    def __init__(self, store: BookStore, clock: Clock = _utcnow) -> None:
        self.store = store
        self.clock = clock

    def _now(self) -> datetime:
        return _coerce_utc(self.clock())

    def _ensure_unique(self, title: str, author: str, exclude_id: Optional[int] = None) -> None:
        duplicate = self.store.find_by_title_author(title, author, exclude_id=exclude_id)
        if duplicate is not None:
            logger.info("book_duplicate_rejected", title=title, author=author, existing_id=duplicate.id)
            raise BookConflictError()

    def list_books(self) -> list[Book]:
        return self.store.list_books()

    def get_book_by_id(self, book_id: Any) -> Book:
        parsed = _parse_book_id(book_id)
        book = self.store.get_book(parsed) if parsed is not None else None
        if book is None:
            raise BookNotFoundError()
        return book

    def create_book(self, payload: Any) -> Book:
        payload = validate_book_payload(payload)
        with self.store.transaction():
            self._ensure_unique(payload.title, payload.author)
            try:
                book = self.store.add_book(payload, self._now())
            except DuplicateBookError as exc:
                raise BookConflictError() from exc
        logger.info("book_created", book_id=book.id, title=book.title)
        return book

    def update_book(self, book_id: Any, payload: Any) -> Book:
        payload = validate_book_payload(payload)
        with self.store.transaction():
            current = self.get_book_by_id(book_id)
            self._ensure_unique(payload.title, payload.author, exclude_id=current.id)
            # updatedAt must move forward even when the clock has not.
            now = max(self._now(), _coerce_utc(current.updated_at) + timedelta(microseconds=1))
            try:
                book = self.store.replace_book(current.id, payload, now)
            except DuplicateBookError as exc:
                raise BookConflictError() from exc
            if book is None:
                raise BookNotFoundError()
        logger.info("book_updated", book_id=book.id)
        return book

    def delete_book(self, book_id: Any) -> Book:
        parsed = _parse_book_id(book_id)
        book = self.store.remove_book(parsed) if parsed is not None else None
        if book is None:
            raise BookNotFoundError()
        logger.info("book_deleted", book_id=book.id)
        return book

    def search_books(self, query: Optional[str]) -> list[Book]:
        needle = (query or "").strip()
        if not needle:
            raise MalformedRequestError()
        return self.store.search_books(needle)


def get_book_store(request: Request) -> BookStore:
    return request.app.state.book_store


def get_book_service(store: BookStore = Depends(get_book_store)) -> BookService:
    return BookService(store)
