from .book import (
    BookOut,
    BookPayload,
    FieldError,
    collect_field_errors,
    validate_book_payload,
)
from .envelope import (
    BookEnvelope,
    BookListEnvelope,
    BookMessageEnvelope,
    BookSearchEnvelope,
    ErrorEnvelope,
    HealthEnvelope,
)

__all__ = [
    "BookEnvelope",
    "BookListEnvelope",
    "BookMessageEnvelope",
    "BookOut",
    "BookPayload",
    "BookSearchEnvelope",
    "ErrorEnvelope",
    "FieldError",
    "HealthEnvelope",
    "collect_field_errors",
    "validate_book_payload",
]
