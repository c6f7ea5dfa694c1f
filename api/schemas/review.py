# api/schemas/review.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict
from .user import UserSummary

class ReviewCreate(BaseModel):
    rating: int
    comment: Optional[str] = ""

class ReviewUpdate(BaseModel):
    rating: Optional[int] = None
    comment: Optional[str] = None

class Review(BaseModel):
    id: int
    book_display_id: str
    rating: int
    comment: str
    user: UserSummary
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ReviewResult(BaseModel):
    review: Review
    average_rating: float
    total_reviews: int

class ReviewList(BaseModel):
    reviews: List[Review]
    average_rating: float
    total_reviews: int

class BookRatings(BaseModel):
    display_id: str
    average_rating: float
    total_reviews: int
