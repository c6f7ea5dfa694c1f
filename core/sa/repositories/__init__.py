# core/sa/repositories/__init__.py
from .book import BookRepository
from .user import UserRepository
from .review import ReviewRepository

__all__ = ['BookRepository', 'UserRepository', 'ReviewRepository']
