from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.db.session import create_session_factory
from app.models.book import Base, Book
from app.schemas.book import BookPayload
from app.stores.base import DuplicateBookError, LockedStore, apply_payload, book_matches


class SqlAlchemyBookStore(LockedStore):
    """Book store backed by a SQLAlchemy engine.

    Every call runs in its own short-lived session; returned ``Book`` objects
    are detached but fully loaded. The unique constraint on
    ``(title_key, author_key)`` backs up the service-level check when
    several processes share one database.
    """

    def __init__(
        self,
        engine: Engine,
        seed: Iterable[BookPayload] = (),
        now: Optional[datetime] = None,
    ) -> None:
        super().__init__()
        self.engine = engine
        self.session_factory: sessionmaker[Session] = create_session_factory(engine)
        Base.metadata.create_all(bind=engine)
        seed = list(seed)
        if seed and not self._has_books():
            for payload in seed:
                self.add_book(payload, now or datetime.now(timezone.utc))

    def _has_books(self) -> bool:
        with self.session_factory() as db:
            return db.scalar(select(func.count()).select_from(Book)) > 0

    def _commit(self, db: Session) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateBookError(str(exc.orig)) from exc

    def list_books(self) -> list[Book]:
        with self.session_factory() as db:
            return list(db.scalars(select(Book).order_by(Book.id)))

    def get_book(self, book_id: int) -> Optional[Book]:
        with self.session_factory() as db:
            return db.get(Book, book_id)

    def find_by_title_author(
        self, title: str, author: str, exclude_id: Optional[int] = None
    ) -> Optional[Book]:
        query = select(Book).where(
            Book.title_key == title.lower(),
            Book.author_key == author.lower(),
        )
        if exclude_id is not None:
            query = query.where(Book.id != exclude_id)
        with self.session_factory() as db:
            return db.scalars(query.limit(1)).first()

    def add_book(self, payload: BookPayload, now: datetime) -> Book:
        book = Book(created_at=now, updated_at=now)
        apply_payload(book, payload)
        with self.transaction(), self.session_factory() as db:
            db.add(book)
            self._commit(db)
            db.refresh(book)
            return book

    def replace_book(self, book_id: int, payload: BookPayload, now: datetime) -> Optional[Book]:
        with self.transaction(), self.session_factory() as db:
            book = db.get(Book, book_id)
            if book is None:
                return None
            apply_payload(book, payload)
            book.updated_at = now
            self._commit(db)
            db.refresh(book)
            return book

    def remove_book(self, book_id: int) -> Optional[Book]:
        with self.transaction(), self.session_factory() as db:
            book = db.get(Book, book_id)
            if book is None:
                return None
            db.delete(book)
            db.commit()
            return book

    def search_books(self, needle: str) -> list[Book]:
        # Filtered in Python: SQL lower() does not fold non-ASCII letters on every backend.
        needle = needle.lower()
        return [book for book in self.list_books() if book_matches(book, needle)]
