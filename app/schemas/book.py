from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from app.core.errors import BookValidationError
from app.models.book import Genre

MIN_PUBLICATION_YEAR = 1000

# Message used when a field is absent or blank.
REQUIRED_MESSAGES = {
    "title": "Title is required",
    "author": "Author is required",
    "genre": "Genre is required",
    "description": "Description is required",
}


def _publication_year_message() -> str:
    return f"Publication year must be between {MIN_PUBLICATION_YEAR} and {date.today().year}"


def _field_error(message: str) -> PydanticCustomError:
    return PydanticCustomError("book_field", message)


def _clean_text(value: Any, *, field: str, label: str, max_length: int) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _field_error(REQUIRED_MESSAGES[field])
    cleaned = value.strip()
    if len(cleaned) > max_length:
        raise _field_error(f"{label} must be between 1 and {max_length} characters")
    return cleaned


class FieldError(BaseModel):
    field: str
    message: str


class BookPayload(BaseModel):
    """Body accepted by create and update; values come out trimmed."""

    title: str
    author: str
    genre: Genre
    publication_year: int = Field(alias="publicationYear")
    description: str

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, value: Any) -> str:
        return _clean_text(value, field="title", label="Title", max_length=200)

    @field_validator("author", mode="before")
    @classmethod
    def validate_author(cls, value: Any) -> str:
        return _clean_text(value, field="author", label="Author", max_length=100)

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, value: Any) -> str:
        return _clean_text(value, field="description", label="Description", max_length=1000)

    @field_validator("genre", mode="before")
    @classmethod
    def validate_genre(cls, value: Any) -> Genre:
        if isinstance(value, Genre):
            return value
        if not isinstance(value, str) or not value.strip():
            raise _field_error(REQUIRED_MESSAGES["genre"])
        try:
            return Genre(value.strip())
        except ValueError:
            raise _field_error("Invalid genre") from None

    @field_validator("publication_year", mode="before")
    @classmethod
    def validate_publication_year(cls, value: Any) -> int:
        year: Optional[int] = None
        if isinstance(value, bool):
            year = None
        elif isinstance(value, int):
            year = value
        elif isinstance(value, float) and value.is_integer():
            year = int(value)
        elif isinstance(value, str):
            try:
                year = int(value.strip())
            except ValueError:
                year = None
        if year is None or not MIN_PUBLICATION_YEAR <= year <= date.today().year:
            raise _field_error(_publication_year_message())
        return year


class BookOut(BaseModel):
    id: int
    title: str
    author: str
    genre: Genre
    publication_year: int = Field(alias="publicationYear")
    description: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        extra="forbid",
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part != "body"]
    return parts[0] if parts else "body"


def _field_aliases() -> dict[str, str]:
    return {
        name: (info.alias or name)
        for name, info in BookPayload.model_fields.items()
    }


def collect_field_errors(errors: Iterable[Mapping[str, Any]]) -> list[FieldError]:
    """Turn pydantic error dicts into ``{field, message}`` pairs.

    Handles both ``ValidationError.errors()`` (locations without the ``body``
    prefix) and FastAPI request validation errors.
    """
    aliases = _field_aliases()
    collected: list[FieldError] = []
    for error in errors:
        error_type = error.get("type")
        if error_type == "json_invalid":
            field = "body"
        else:
            field = _field_name(tuple(error.get("loc", ())))
            field = aliases.get(field, field)
        if field == "body":
            if error_type == "json_invalid":
                message = "Malformed JSON body"
            elif error_type == "missing":
                message = "Request body is required"
            else:
                message = "Request body must be a JSON object"
        elif error_type == "missing":
            if field == "publicationYear":
                message = _publication_year_message()
            else:
                message = REQUIRED_MESSAGES.get(field, "Field is required")
        else:
            message = str(error.get("msg", "Invalid value"))
        collected.append(FieldError(field=field, message=message))
    return collected


def validate_book_payload(data: Any) -> BookPayload:
    """Validate a raw payload, raising ``BookValidationError`` with every violation."""
    if isinstance(data, BookPayload):
        return data
    try:
        return BookPayload.model_validate(data)
    except ValidationError as exc:
        raise BookValidationError(
            [error.model_dump() for error in collect_field_errors(exc.errors())]
        ) from exc
