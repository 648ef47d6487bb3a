"""Book Management API."""
