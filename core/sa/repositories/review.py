# core/sa/repositories/review.py
from typing import List, Optional, Tuple
from sqlalchemy import func, desc
from sqlalchemy.orm import Session, joinedload
from core.sa.models import Review

class ReviewRepository:
    """Repository for managing Review entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, review_id: int) -> Optional[Review]:
        return self.session.get(Review, review_id)

    def get_for_reviewer(self, book_display_id: str, user_id: int) -> Optional[Review]:
        """Get the single review a user left on a book, if any.

        Args:
            book_display_id: Display id of the book
            user_id: Internal id of the reviewer

        Returns:
            The Review object if found, None otherwise
        """
        return (
            self.session.query(Review)
            .filter(Review.book_display_id == book_display_id, Review.user_id == user_id)
            .one_or_none()
        )

    def get_for_book(self, book_display_id: str) -> List[Review]:
        """Get all reviews of a book, newest first"""
        return (
            self.session.query(Review)
            .options(joinedload(Review.user))
            .filter(Review.book_display_id == book_display_id)
            .order_by(desc(Review.created_at), desc(Review.id))
            .all()
        )

    def get_by_user(self, user_id: int) -> List[Review]:
        return self.session.query(Review).filter(Review.user_id == user_id).all()

    def add(self, review: Review) -> Review:
        self.session.add(review)
        return review

    def delete(self, review: Review) -> None:
        self.session.delete(review)

    def get_rating_stats(self, book_display_id: str) -> Tuple[int, int]:
        """Get the number of reviews and the sum of their ratings for a book.

        Pending changes are flushed first so the numbers include them.

        Args:
            book_display_id: Display id of the book

        Returns:
            Tuple of (count, rating sum)
        """
        self.session.flush()
        count, total = (
            self.session.query(func.count(Review.id), func.coalesce(func.sum(Review.rating), 0))
            .filter(Review.book_display_id == book_display_id)
            .one()
        )
        return count, total
