# core/resolvers/book_resolver.py
from typing import Union
from sqlalchemy.orm import Session

from core.exceptions import NotFound
from core.sa.models import Book, User
from core.sa.repositories.book import BookRepository
from core.sa.repositories.user import UserRepository


def _as_internal_id(ref: Union[int, str]):
    if isinstance(ref, int):
        return ref
    ref = ref.strip()
    return int(ref) if ref.isdigit() else None


def resolve_book_ref(session: Session, ref: Union[int, str]) -> Book:
    """Find a book by internal id or display id.

    Integer-looking refs are tried as the internal id first, anything else
    (or an id with no match) is looked up as a display id such as ``BK-7F3K9Q``.

    Raises:
        NotFound: If neither lookup matches
    """
    repo = BookRepository(session)
    internal_id = _as_internal_id(ref)
    if internal_id is not None:
        book = repo.get_by_id(internal_id)
        if book is not None:
            return book
    book = repo.get_by_display_id(str(ref).strip().upper())
    if book is None:
        raise NotFound("Book", ref)
    return book


def resolve_user_ref(session: Session, ref: Union[int, str]) -> User:
    """Find a user by internal id or ``USR-`` display id"""
    repo = UserRepository(session)
    internal_id = _as_internal_id(ref)
    if internal_id is not None:
        user = repo.get_by_id(internal_id)
        if user is not None:
            return user
    user = repo.get_by_display_id(str(ref).strip().upper())
    if user is None:
        raise NotFound("User", ref)
    return user
