# core/sa/models/user.py
from datetime import datetime
from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

class User(Base, TimestampMixin):
    __tablename__ = 'user'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    display_id: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    session_id: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True)
    last_active: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    owned_books = relationship('Book', back_populates='owner', foreign_keys='Book.owner_id')
    borrowed_books = relationship('Book', back_populates='borrower', foreign_keys='Book.borrower_id')
    book_requests = relationship('BookRequest', back_populates='user')
    reviews = relationship('Review', back_populates='user')

    def __repr__(self) -> str:
        return f"<User {self.display_id} {self.username!r}>"
