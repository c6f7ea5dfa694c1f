# core/sa/models/book.py
from datetime import datetime, UTC
from enum import Enum
from sqlalchemy import String, Integer, Float, ForeignKey, DateTime, Index, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class BookStatus(str, Enum):
    AVAILABLE = "available"
    PENDING_APPROVAL = "pending_approval"
    LENT = "lent"

class BookRequest(Base):
    """A user waiting for the owner's decision on borrowing a book.

    Rows are ordered by id, which gives the roster its request order.
    """
    __tablename__ = 'book_request'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    book_id: Mapped[int] = mapped_column(ForeignKey('book.id'), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey('user.id'), nullable=False)
    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))

    # Relationships
    book = relationship('Book', back_populates='requests')
    user = relationship('User', back_populates='book_requests')

    __table_args__ = (
        UniqueConstraint('book_id', 'user_id', name='uix_book_request_book_user'),
    )

class Book(Base, TimestampMixin):
    __tablename__ = 'book'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    display_id: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    genre: Mapped[str] = mapped_column(String(100), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey('user.id'), nullable=False)
    borrower_id: Mapped[int | None] = mapped_column(ForeignKey('user.id'), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=BookStatus.AVAILABLE.value)
    average_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    owner = relationship('User', foreign_keys=[owner_id], back_populates='owned_books')
    borrower = relationship('User', foreign_keys=[borrower_id], back_populates='borrowed_books')
    requests = relationship(
        'BookRequest',
        back_populates='book',
        order_by='BookRequest.id',
        cascade='all, delete-orphan'
    )
    reviews = relationship('Review', back_populates='book', cascade='all, delete-orphan')

    __table_args__ = (
        Index('idx_book_owner_id', 'owner_id'),
        Index('idx_book_borrower_id', 'borrower_id'),
        Index('idx_book_status', 'status'),
    )

    @property
    def pending_requesters(self):
        """Users waiting for approval, oldest request first"""
        return [request.user for request in self.requests]

    @property
    def pending_requester_ids(self) -> list[int]:
        return [request.user_id for request in self.requests]

    def __repr__(self) -> str:
        return f"<Book {self.display_id} {self.title!r} ({self.status})>"
