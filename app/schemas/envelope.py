from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.book import BookOut, FieldError


class BookEnvelope(BaseModel):
    success: Literal[True] = True
    data: BookOut


class BookMessageEnvelope(BookEnvelope):
    message: str


class BookListEnvelope(BaseModel):
    success: Literal[True] = True
    data: list[BookOut]
    count: int

    @classmethod
    def of(cls, books: list[BookOut]) -> "BookListEnvelope":
        return cls(data=books, count=len(books))


class BookSearchEnvelope(BookListEnvelope):
    query: str


class HealthEnvelope(BaseModel):
    success: Literal[True] = True
    message: str
    timestamp: datetime


class ErrorEnvelope(BaseModel):
    """Documented shape of every failure response."""

    success: Literal[False] = False
    message: str
    code: str
    errors: Optional[list[FieldError]] = None
    error: Optional[str] = Field(default=None, description="Exception text, development mode only")
