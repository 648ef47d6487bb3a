from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.core.errors import MalformedRequestError
from app.schemas.book import BookOut, BookPayload
from app.schemas.envelope import (
    BookEnvelope,
    BookListEnvelope,
    BookMessageEnvelope,
    BookSearchEnvelope,
    ErrorEnvelope,
)
from app.services.book_service import BookService, get_book_service

router = APIRouter(prefix="/api/books", tags=["books"])

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorEnvelope}}
_INVALID = {status.HTTP_400_BAD_REQUEST: {"model": ErrorEnvelope}}
_CONFLICT = {status.HTTP_409_CONFLICT: {"model": ErrorEnvelope}}


@router.get("", response_model=BookListEnvelope)
def list_books(service: BookService = Depends(get_book_service)) -> BookListEnvelope:
    """Return every book in insertion order."""
    books = [BookOut.model_validate(book) for book in service.list_books()]
    return BookListEnvelope.of(books)


# Registered before "/{book_id}" so "search" is never read as an id.
@router.get("/search", include_in_schema=False)
@router.get("/search/", response_model=BookSearchEnvelope, responses=_INVALID)
def search_books_without_query() -> BookSearchEnvelope:
    raise MalformedRequestError()


@router.get("/search/{query}", response_model=BookSearchEnvelope, responses=_INVALID)
def search_books(
    query: str,
    service: BookService = Depends(get_book_service),
) -> BookSearchEnvelope:
    """Case-insensitive substring match on title, author, genre and description."""
    books = [BookOut.model_validate(book) for book in service.search_books(query)]
    return BookSearchEnvelope(data=books, count=len(books), query=query)


@router.get("/{book_id}", response_model=BookEnvelope, responses=_NOT_FOUND)
def get_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> BookEnvelope:
    """Retrieve a single book by identifier."""
    book = service.get_book_by_id(book_id)
    return BookEnvelope(data=BookOut.model_validate(book))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=BookMessageEnvelope,
    responses={**_INVALID, **_CONFLICT},
)
def create_book(
    payload: BookPayload,
    service: BookService = Depends(get_book_service),
) -> BookMessageEnvelope:
    book = service.create_book(payload)
    return BookMessageEnvelope(message="Book created successfully", data=BookOut.model_validate(book))


@router.put(
    "/{book_id}",
    response_model=BookMessageEnvelope,
    responses={**_INVALID, **_NOT_FOUND, **_CONFLICT},
)
def update_book(
    book_id: str,
    payload: BookPayload,
    service: BookService = Depends(get_book_service),
) -> BookMessageEnvelope:
    """Replace every editable field; id and createdAt are kept."""
    book = service.update_book(book_id, payload)
    return BookMessageEnvelope(message="Book updated successfully", data=BookOut.model_validate(book))


@router.delete("/{book_id}", response_model=BookMessageEnvelope, responses=_NOT_FOUND)
def delete_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> BookMessageEnvelope:
    book = service.delete_book(book_id)
    return BookMessageEnvelope(message="Book deleted successfully", data=BookOut.model_validate(book))
