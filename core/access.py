# core/access.py
from core.exceptions import NotAuthorized
from core.sa.models import Book, User


def is_owner(book: Book, user: User) -> bool:
    return user is not None and book.owner_id == user.id


def is_borrower(book: Book, user: User) -> bool:
    return user is not None and book.borrower_id is not None and book.borrower_id == user.id


def ensure_owner(book: Book, user: User, action: str = "modify this book") -> None:
    """Raise NotAuthorized unless the user owns the book"""
    if not is_owner(book, user):
        raise NotAuthorized(f"Only the owner of {book.display_id} can {action}")


def ensure_borrower(book: Book, user: User, action: str = "return this book") -> None:
    """Raise NotAuthorized unless the user currently borrows the book"""
    if not is_borrower(book, user):
        raise NotAuthorized(f"Only the current borrower of {book.display_id} can {action}")
