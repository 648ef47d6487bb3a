from .book import Base, Book, Genre

__all__ = ["Base", "Book", "Genre"]
