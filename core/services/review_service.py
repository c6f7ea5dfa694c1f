# core/services/review_service.py

import logging
from typing import List, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, InvalidRating, NotAuthorized, NotFound
from core.resolvers.book_resolver import resolve_book_ref
from core.sa.models import Book, Review, User
from core.sa.repositories.book import BookRepository
from core.sa.repositories.review import ReviewRepository

logger = logging.getLogger(__name__)

BookRef = Union[int, str, Book]


def validate_rating(rating) -> int:
    # bool is an int subclass but never a rating
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise InvalidRating(rating)
    return rating


class ReviewService:
    """Reviews and the per-book rating aggregates derived from them.

    Every write recomputes ``average_rating`` and ``total_reviews`` on the book
    before committing, so the review and the aggregates land in one commit.
    ``recompute_book_aggregates`` can be called at any time to heal drift.
    """

    def __init__(self, session: Session):
        self.session = session
        self.reviews = ReviewRepository(session)

    def _book(self, ref: BookRef) -> Book:
        if isinstance(ref, Book):
            return ref
        return resolve_book_ref(self.session, ref)

    def apply_aggregates(self, book: Book) -> Book:
        """Recompute the aggregates of a book in the session without committing"""
        count, total = self.reviews.get_rating_stats(book.display_id)
        book.total_reviews = count
        book.average_rating = total / count if count else 0.0
        return book

    def _review_on_book(self, book: Book, review_id: int) -> Review:
        review = self.reviews.get_by_id(review_id)
        if review is None or review.book_display_id != book.display_id:
            raise NotFound("Review", review_id)
        return review

    def upsert_review(self, book_ref: BookRef, reviewer: User, rating: int, comment: Optional[str] = "") -> Review:
        """Create the reviewer's review of a book, or replace it if one exists.

        Args:
            book_ref: Book, internal id or display id
            reviewer: The user writing the review
            rating: Integer from 1 to 5
            comment: Free text, may be empty

        Returns:
            The saved Review object
        """
        rating = validate_rating(rating)
        comment = (comment or "").strip()
        book = self._book(book_ref)

        review = self.reviews.get_for_reviewer(book.display_id, reviewer.id)
        created = review is None
        if created:
            review = self.reviews.add(Review(
                book_display_id=book.display_id,
                user_id=reviewer.id,
                rating=rating,
                comment=comment
            ))
        else:
            review.rating = rating
            review.comment = comment

        try:
            self.apply_aggregates(book)
            self.session.commit()
        except IntegrityError as e:
            # Another request inserted this reviewer's review first
            self.session.rollback()
            review = self.reviews.get_for_reviewer(book.display_id, reviewer.id)
            if review is None:
                raise ConflictError("Review could not be saved") from e
            review.rating = rating
            review.comment = comment
            self.apply_aggregates(book)
            self.session.commit()
            created = False

        logger.info(
            f"{reviewer.display_id} {'added' if created else 'updated'} review on {book.display_id}: "
            f"avg={book.average_rating:.2f} n={book.total_reviews}"
        )
        return review

    def list_reviews(self, book_ref: BookRef) -> Tuple[Book, List[Review]]:
        book = self._book(book_ref)
        return book, self.reviews.get_for_book(book.display_id)

    def update_review(
        self,
        book_ref: BookRef,
        review_id: int,
        caller: User,
        rating: Optional[int] = None,
        comment: Optional[str] = None
    ) -> Review:
        """Edit a review by id; only its author may do so"""
        if rating is not None:
            validate_rating(rating)
        book = self._book(book_ref)
        review = self._review_on_book(book, review_id)
        if review.user_id != caller.id:
            raise NotAuthorized("Only the author of a review can edit it")

        if rating is not None:
            review.rating = rating
        if comment is not None:
            review.comment = comment.strip()
        self.apply_aggregates(book)
        self.session.commit()
        logger.info(f"{caller.display_id} edited review {review.id} on {book.display_id}")
        return review

    def delete_review(self, book_ref: BookRef, review_id: int, caller: User) -> Book:
        """Delete a review by id; only its author may do so.

        Returns:
            The book with refreshed aggregates
        """
        book = self._book(book_ref)
        review = self._review_on_book(book, review_id)
        if review.user_id != caller.id:
            raise NotAuthorized("Only the author of a review can delete it")

        self.reviews.delete(review)
        self.apply_aggregates(book)
        self.session.commit()
        logger.info(f"{caller.display_id} deleted review {review_id} on {book.display_id}")
        return book

    def recompute_book_aggregates(self, book_ref: BookRef) -> Book:
        """Recompute a book's rating aggregates from its reviews.

        Idempotent; used to repair a book whose aggregates drifted from its
        reviews.
        """
        book = self._book(book_ref)
        before = (book.average_rating, book.total_reviews)
        self.apply_aggregates(book)
        self.session.commit()
        after = (book.average_rating, book.total_reviews)
        if before != after:
            logger.info(f"Repaired aggregates of {book.display_id}: {before} -> {after}")
        return book

    def recompute_all(self) -> List[str]:
        """Recompute every book's aggregates.

        Returns:
            Display ids of the books whose stored aggregates were wrong
        """
        repaired = []
        for book in BookRepository(self.session).get_all():
            before = (book.average_rating, book.total_reviews)
            self.apply_aggregates(book)
            if (book.average_rating, book.total_reviews) != before:
                repaired.append(book.display_id)
        self.session.commit()
        if repaired:
            logger.info(f"Repaired aggregates of {len(repaired)} books")
        return repaired
