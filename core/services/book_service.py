# core/services/book_service.py

import logging
from typing import Callable, Dict, Any, List, Optional, Union

from sqlalchemy.orm import Session

from core import lifecycle
from core.access import ensure_owner
from core.exceptions import ValidationError, InvalidTransition
from core.resolvers.book_resolver import resolve_book_ref, resolve_user_ref
from core.sa.models import Book, BookStatus, User
from core.sa.repositories.book import BookRepository

logger = logging.getLogger(__name__)

BookRef = Union[int, str]

EDITABLE_FIELDS = ('title', 'author', 'genre', 'image_url')
REQUIRED_FIELDS = ('title', 'author', 'genre')


def _clean_required(field: str, value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


class BookService:
    def __init__(self, session: Session):
        self.session = session
        self.books = BookRepository(session)

    # Catalogue

    def create_book(
        self,
        owner: User,
        title: str,
        author: str,
        genre: str,
        image_url: Optional[str] = None
    ) -> Book:
        """Create an available book owned by the caller"""
        book = self.books.create_book(
            owner_id=owner.id,
            title=_clean_required('title', title),
            author=_clean_required('author', author),
            genre=_clean_required('genre', genre),
            image_url=image_url.strip() if image_url and image_url.strip() else None
        )
        logger.info(f"{owner.display_id} created {book.display_id} ({book.title!r})")
        return book

    def get_book(self, ref: BookRef) -> Book:
        return resolve_book_ref(self.session, ref)

    def list_owned(self, owner: User) -> List[Book]:
        return self.books.get_owned(owner.id)

    def list_available(self, user: User, genre: Optional[str] = None) -> List[Book]:
        return self.books.get_available_for(user.id, genre=genre)

    def list_lent(self, owner: User) -> List[Book]:
        return self.books.get_owned(owner.id, status=BookStatus.LENT)

    def list_borrowed(self, user: User) -> List[Book]:
        return self.books.get_borrowed_by(user.id)

    def list_pending_approval(self, owner: User) -> List[Book]:
        return self.books.get_owned(owner.id, status=BookStatus.PENDING_APPROVAL)

    def list_genres(self) -> List[str]:
        return self.books.get_genres()

    def update_details(self, ref: BookRef, caller: User, updates: Dict[str, Any]) -> Book:
        """Apply owner edits to the descriptive fields of a book.

        Args:
            ref: Internal or display id of the book
            caller: The user making the change
            updates: Mapping of field name to new value

        Raises:
            NotFound: If the book does not exist
            NotAuthorized: If the caller does not own the book
            ValidationError: On unknown fields or blank required fields
        """
        book = resolve_book_ref(self.session, ref)
        ensure_owner(book, caller, "edit its details")

        invalid = sorted(set(updates) - set(EDITABLE_FIELDS))
        if invalid:
            raise ValidationError(f"Invalid updates requested: {', '.join(invalid)}")

        cleaned = {}
        for field, value in updates.items():
            if field in REQUIRED_FIELDS:
                cleaned[field] = _clean_required(field, value)
            else:
                cleaned[field] = value.strip() if value and value.strip() else None

        for field, value in cleaned.items():
            setattr(book, field, value)
        self.session.commit()
        logger.info(f"{caller.display_id} updated {book.display_id}: {', '.join(cleaned) or 'no changes'}")
        return book

    def delete_book(self, ref: BookRef, caller: User) -> str:
        """Delete a book with its reviews and pending requests.

        Returns:
            The display id of the deleted book

        Raises:
            InvalidTransition: While the book is lent out
        """
        book = resolve_book_ref(self.session, ref)
        ensure_owner(book, caller, "delete it")
        if book.status == BookStatus.LENT:
            raise InvalidTransition(book.status, "delete", "the book must be returned first")

        display_id = book.display_id
        self.books.delete_book(book)
        self.session.commit()
        logger.info(f"{caller.display_id} deleted {display_id}")
        return display_id

    # Lending lifecycle

    def _transition(self, ref: BookRef, apply: Callable[[Book], Book]) -> Book:
        book = resolve_book_ref(self.session, ref)
        try:
            apply(book)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return book

    def request_borrow(self, ref: BookRef, caller: User) -> Book:
        return self._transition(ref, lambda book: lifecycle.request_to_borrow(book, caller))

    def borrow(self, ref: BookRef, caller: User) -> Book:
        return self._transition(ref, lambda book: lifecycle.direct_borrow(book, caller))

    def _decide(self, ref: BookRef, caller: User, requester_ref: Union[int, str],
                decide: Callable[[Book, User, User], Book], action: str) -> Book:
        def apply(book: Book) -> Book:
            # Only the owner learns whether the requester exists
            ensure_owner(book, caller, action)
            requester = resolve_user_ref(self.session, requester_ref)
            return decide(book, caller, requester)
        return self._transition(ref, apply)

    def approve(self, ref: BookRef, caller: User, requester_ref: Union[int, str]) -> Book:
        return self._decide(ref, caller, requester_ref, lifecycle.approve, "approve borrow requests")

    def reject(self, ref: BookRef, caller: User, requester_ref: Union[int, str]) -> Book:
        return self._decide(ref, caller, requester_ref, lifecycle.reject, "reject borrow requests")

    def withdraw_request(self, ref: BookRef, caller: User) -> Book:
        return self._transition(ref, lambda book: lifecycle.withdraw_request(book, caller))

    def return_book(self, ref: BookRef, caller: User) -> Book:
        return self._transition(ref, lambda book: lifecycle.return_book(book, caller))

    # Maintenance

    def find_inconsistent(self) -> Dict[str, List[str]]:
        """Map display id to invariant violations for every inconsistent book"""
        report = {}
        for book in self.books.get_all():
            problems = lifecycle.check_invariants(book)
            if problems:
                report[book.display_id] = problems
        return report
