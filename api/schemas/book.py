# api/schemas/book.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict
from core.sa.models.book import BookStatus
from .user import UserSummary

class BookCreate(BaseModel):
    title: str
    author: str
    genre: str
    image_url: Optional[str] = None

class BookDetailsUpdate(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    image_url: Optional[str] = None

    # Unknown fields are rejected rather than ignored
    model_config = ConfigDict(extra='forbid')

class Book(BaseModel):
    """The single response shape for a book"""
    id: int
    display_id: str
    title: str
    author: str
    genre: str
    image_url: Optional[str] = None
    status: BookStatus
    owner: UserSummary
    borrower: Optional[UserSummary] = None
    pending_requesters: List[UserSummary] = []
    average_rating: float
    total_reviews: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class BookList(BaseModel):
    items: List[Book]
    total: int

class BookDeleted(BaseModel):
    message: str
    display_id: str

class GenreList(BaseModel):
    items: List[str]
    total: int
