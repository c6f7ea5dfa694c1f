# core/sa/models/review.py
from sqlalchemy import Integer, String, Text, ForeignKey, UniqueConstraint, CheckConstraint, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class Review(Base, TimestampMixin):
    """A reviewer's rating of a book, keyed by the book's display id"""
    __tablename__ = 'review'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    book_display_id: Mapped[str] = mapped_column(String(16), ForeignKey('book.display_id'), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey('user.id'), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Relationships
    book = relationship('Book', back_populates='reviews')
    user = relationship('User', back_populates='reviews')

    __table_args__ = (
        UniqueConstraint('book_display_id', 'user_id', name='uix_review_book_user'),
        CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
        Index('idx_review_book_display_id', 'book_display_id'),
    )
