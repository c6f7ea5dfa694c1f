# core/services/user_service.py

import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from core import lifecycle
from core.exceptions import AuthenticationError, ConflictError, InvalidTransition, ValidationError
from core.sa.models import BookStatus, User
from core.sa.repositories.book import BookRepository
from core.sa.repositories.review import ReviewRepository
from core.sa.repositories.user import UserRepository
from core.services.review_service import ReviewService
from core.sessions import hash_password, verify_password, new_session_token, is_expired

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 3


def _validate_username(username: Optional[str]) -> str:
    username = (username or "").strip()
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters")
    return username


def _validate_email(email: Optional[str]) -> str:
    email = (email or "").strip().lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise ValidationError("A valid email address is required")
    return email


def _validate_password(password: Optional[str]) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


class UserService:
    def __init__(self, session: Session):
        self.session = session
        self.users = UserRepository(session)

    def _start_session(self, user: User) -> str:
        token = new_session_token()
        self.users.set_session(user, token)
        self.session.commit()
        return token

    def signup(self, username: str, email: str, password: str) -> Tuple[User, str]:
        """Register a user and log them in.

        Returns:
            Tuple of (user, session token)

        Raises:
            ValidationError: On malformed input
            ConflictError: If the username or email is taken
        """
        user = self.users.create_user(
            username=_validate_username(username),
            email=_validate_email(email),
            password_hash=hash_password(_validate_password(password))
        )
        token = self._start_session(user)
        logger.info(f"Signed up {user.display_id} ({user.username})")
        return user, token

    def login(self, password: str, username: Optional[str] = None, email: Optional[str] = None) -> Tuple[User, str]:
        """Log in by username or email, replacing any previous session token"""
        user = self.users.get_by_login(username=username, email=email)
        if user is None:
            logger.warning(f"Login failed, no user for username={username!r} email={email!r}")
            raise AuthenticationError("Invalid credentials")
        if not verify_password(password or "", user.password_hash):
            logger.warning(f"Login failed, wrong password for {user.display_id}")
            raise AuthenticationError("Invalid credentials")

        token = self._start_session(user)
        logger.info(f"Logged in {user.display_id}")
        return user, token

    def logout(self, user: User) -> None:
        self.users.set_session(user, None)
        self.session.commit()
        logger.info(f"Logged out {user.display_id}")

    def authenticate(self, token: Optional[str]) -> User:
        """Resolve a session token to its user and refresh its activity time.

        Raises:
            AuthenticationError: If the token is missing, unknown or expired
        """
        if not token:
            raise AuthenticationError("Authentication required")
        user = self.users.get_by_session_id(token)
        if user is None:
            raise AuthenticationError("Invalid or expired session")
        if is_expired(user.last_active):
            self.users.set_session(user, None)
            self.session.commit()
            logger.info(f"Session of {user.display_id} expired")
            raise AuthenticationError("Invalid or expired session")

        self.users.touch(user)
        self.session.commit()
        return user

    def update_profile(
        self,
        user: User,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None
    ) -> User:
        if username is not None and username.strip() != user.username:
            username = _validate_username(username)
            if self.users.is_username_taken(username, exclude_user_id=user.id):
                raise ConflictError("Username already taken")
            user.username = username
        if email is not None and email.strip().lower() != user.email:
            email = _validate_email(email)
            if self.users.is_email_taken(email, exclude_user_id=user.id):
                raise ConflictError("Email already taken")
            user.email = email
        if password is not None:
            user.password_hash = hash_password(_validate_password(password))
        self.session.commit()
        logger.info(f"Updated profile of {user.display_id}")
        return user

    def delete_account(self, user: User) -> None:
        """Delete a user and everything that references them.

        Refused while the user is borrowing a book or has a book lent out, so
        no borrower ever points at a missing user. Otherwise the user's pending
        requests are withdrawn, their reviews removed (with aggregates
        recomputed) and their books deleted.

        Raises:
            InvalidTransition: While a lend involving the user is open
        """
        books = BookRepository(self.session)
        borrowed = books.get_borrowed_by(user.id)
        if borrowed:
            raise InvalidTransition(
                BookStatus.LENT.value, "delete account",
                f"return {', '.join(b.display_id for b in borrowed)} first"
            )
        lent = books.get_owned(user.id, status=BookStatus.LENT)
        if lent:
            raise InvalidTransition(
                BookStatus.LENT.value, "delete account",
                f"{', '.join(b.display_id for b in lent)} must be returned first"
            )

        display_id = user.display_id
        try:
            for book in books.get_requested_by(user.id):
                lifecycle.withdraw_request(book, user)
            self.session.flush()

            review_service = ReviewService(self.session)
            reviewed = set()
            for review in ReviewRepository(self.session).get_by_user(user.id):
                reviewed.add(review.book_display_id)
                self.session.delete(review)
            self.session.flush()

            owned = books.get_owned(user.id)
            owned_ids = {book.display_id for book in owned}
            for book_display_id in sorted(reviewed - owned_ids):
                book = books.get_by_display_id(book_display_id)
                review_service.apply_aggregates(book)

            for book in owned:
                books.delete_book(book)
            self.session.flush()

            self.session.expire(user)
            self.users.delete_user(user)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info(f"Deleted account {display_id} and {len(owned_ids)} owned books")
