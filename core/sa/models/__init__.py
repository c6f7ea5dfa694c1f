# core/sa/models/__init__.py
from .base import Base, TimestampMixin
from .user import User
from .book import Book, BookRequest, BookStatus
from .review import Review

__all__ = [
    'Base',
    'TimestampMixin',
    'User',
    'Book',
    'BookRequest',
    'BookStatus',
    'Review'
]
