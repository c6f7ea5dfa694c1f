# api/routes/reviews.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.sa.database import get_db
from core.sa.models import User
from core.services.review_service import ReviewService
from api.dependencies import get_current_user
from api.schemas.review import BookRatings, Review, ReviewCreate, ReviewList, ReviewResult, ReviewUpdate

router = APIRouter(prefix="/books", tags=["reviews"])

@router.post("/{book_ref}/reviews", response_model=ReviewResult)
def upsert_review(
    book_ref: str,
    body: ReviewCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create the caller's review of a book, or replace their existing one"""
    service = ReviewService(db)
    review = service.upsert_review(book_ref, current_user, body.rating, body.comment)
    book = review.book
    return ReviewResult(
        review=Review.model_validate(review),
        average_rating=book.average_rating,
        total_reviews=book.total_reviews
    )

@router.get("/{book_ref}/reviews", response_model=ReviewList)
def get_book_reviews(book_ref: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    book, reviews = ReviewService(db).list_reviews(book_ref)
    return ReviewList(
        reviews=[Review.model_validate(review) for review in reviews],
        average_rating=book.average_rating,
        total_reviews=book.total_reviews
    )

@router.put("/{book_ref}/reviews/{review_id}", response_model=ReviewResult)
def update_review(
    book_ref: str,
    review_id: int,
    body: ReviewUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    review = ReviewService(db).update_review(
        book_ref, review_id, current_user, rating=body.rating, comment=body.comment
    )
    book = review.book
    return ReviewResult(
        review=Review.model_validate(review),
        average_rating=book.average_rating,
        total_reviews=book.total_reviews
    )

@router.delete("/{book_ref}/reviews/{review_id}", response_model=BookRatings)
def delete_review(
    book_ref: str,
    review_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    book = ReviewService(db).delete_review(book_ref, review_id, current_user)
    return BookRatings(
        display_id=book.display_id,
        average_rating=book.average_rating,
        total_reviews=book.total_reviews
    )
