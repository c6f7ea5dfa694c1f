# core/sa/__init__.py
from .database import Database
from .models import (
    Base, User, Book, BookRequest, BookStatus, Review
)

__all__ = [
    'Database',
    'Base',
    'User',
    'Book',
    'BookRequest',
    'BookStatus',
    'Review'
]
