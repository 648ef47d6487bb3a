from __future__ import annotations

from app.core.settings import AppSettings
from app.db.session import create_book_engine

from .base import BookStore, DuplicateBookError
from .memory import InMemoryBookStore
from .seed import SEED_BOOKS, seed_payloads
from .sql import SqlAlchemyBookStore


def build_book_store(settings: AppSettings) -> BookStore:
    """Create the store selected by ``BOOK_STORE_BACKEND``."""
    seed = seed_payloads() if settings.seed_books else []
    if settings.store_backend == "sqlalchemy":
        return SqlAlchemyBookStore(create_book_engine(settings.database_url), seed=seed)
    return InMemoryBookStore(seed=seed)


__all__ = [
    "BookStore",
    "DuplicateBookError",
    "InMemoryBookStore",
    "SqlAlchemyBookStore",
    "SEED_BOOKS",
    "build_book_store",
    "seed_payloads",
]
