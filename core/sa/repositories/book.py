# core/sa/repositories/book.py
from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from ..models import Book, BookRequest, BookStatus
from core.utils.ids import BOOK_PREFIX
from .base import BaseRepository

class BookRepository(BaseRepository[Book]):
    model = Book
    id_prefix = BOOK_PREFIX

    def __init__(self, session: Session):
        super().__init__(session)

    def _query(self):
        """Base query with the people attached to a book loaded up front"""
        return self.session.query(Book).options(
            selectinload(Book.owner),
            selectinload(Book.borrower),
            selectinload(Book.requests).selectinload(BookRequest.user)
        )

    def create_book(
        self,
        owner_id: int,
        title: str,
        author: str,
        genre: str,
        image_url: Optional[str] = None
    ) -> Book:
        """Create a new available book with a unique display id.

        Args:
            owner_id: Internal id of the owning user
            title: Book title
            author: Book author
            genre: Book genre
            image_url: Optional cover image url

        Returns:
            The created Book object
        """
        return self._insert_with_display_id(
            lambda display_id: Book(
                display_id=display_id,
                title=title,
                author=author,
                genre=genre,
                image_url=image_url,
                owner_id=owner_id,
                status=BookStatus.AVAILABLE.value,
                average_rating=0.0,
                total_reviews=0
            ),
            conflict_message=f"Book could not be created for owner {owner_id}"
        )

    def get_owned(self, owner_id: int, status: Optional[BookStatus] = None) -> List[Book]:
        """Get books owned by a user, optionally filtered by status.

        Args:
            owner_id: Internal id of the owner
            status: Only return books in this status

        Returns:
            List of Book objects, oldest first
        """
        query = self._query().filter(Book.owner_id == owner_id)
        if status is not None:
            query = query.filter(Book.status == status.value)
        return query.order_by(Book.id).all()

    def get_available_for(self, user_id: int, genre: Optional[str] = None) -> List[Book]:
        """Get available books owned by anyone except the given user.

        Args:
            user_id: Internal id of the user browsing
            genre: Optional genre filter (case-insensitive)

        Returns:
            List of available Book objects
        """
        query = self._query().filter(
            Book.owner_id != user_id,
            Book.status == BookStatus.AVAILABLE.value
        )
        if genre:
            query = query.filter(func.lower(Book.genre) == genre.strip().lower())
        return query.order_by(Book.id).all()

    def get_borrowed_by(self, user_id: int) -> List[Book]:
        return (
            self._query()
            .filter(Book.borrower_id == user_id)
            .order_by(Book.id)
            .all()
        )

    def get_requested_by(self, user_id: int) -> List[Book]:
        """Books where the user sits in the pending roster"""
        return (
            self._query()
            .join(BookRequest, BookRequest.book_id == Book.id)
            .filter(BookRequest.user_id == user_id)
            .order_by(Book.id)
            .all()
        )

    def get_genres(self) -> List[str]:
        """Get the distinct genres across all books, sorted alphabetically"""
        rows = self.session.query(Book.genre).distinct().order_by(Book.genre).all()
        return [genre for (genre,) in rows]

    def get_all(self, status: Optional[BookStatus] = None, limit: Optional[int] = None,
                offset: Optional[int] = None) -> List[Book]:
        query = self._query()
        if status:
            query = query.filter(Book.status == status.value)
        query = query.order_by(Book.id)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        return query.all()

    def count_books(self) -> int:
        return self.session.query(Book).count()

    def delete_book(self, book: Book) -> None:
        """Delete a book; its requests and reviews go with it"""
        self.session.delete(book)
