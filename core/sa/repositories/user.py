from typing import List, Optional
from datetime import datetime, UTC
from sqlalchemy import or_
from sqlalchemy.orm import Session
from core.exceptions import ConflictError
from core.sa.models import User
from core.utils.ids import USER_PREFIX
from .base import BaseRepository

class UserRepository(BaseRepository[User]):
    """Repository for managing User entities."""

    model = User
    id_prefix = USER_PREFIX

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        super().__init__(session)

    def create_user(self, username: str, email: str, password_hash: str) -> User:
        """Create a new user with a unique display id.

        Args:
            username: The unique username
            email: The unique email address (stored lowercased)
            password_hash: Already hashed password

        Returns:
            The created User object

        Raises:
            ConflictError: If the username or email is already taken
        """
        email = email.strip().lower()
        if self.get_by_username(username) or self.get_by_email(email):
            raise ConflictError("User with this email or username already exists")

        return self._insert_with_display_id(
            lambda display_id: User(
                display_id=display_id,
                username=username,
                email=email,
                password_hash=password_hash
            ),
            conflict_message="User with this email or username already exists"
        )

    def get_by_username(self, username: str) -> Optional[User]:
        return self.session.query(User).filter(User.username == username).one_or_none()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.session.query(User).filter(User.email == email.strip().lower()).one_or_none()

    def get_by_login(self, username: Optional[str] = None, email: Optional[str] = None) -> Optional[User]:
        """Find the user matching either the username or the email.

        Args:
            username: Username to match, if given
            email: Email to match, if given

        Returns:
            The matching User object or None
        """
        conditions = []
        if username:
            conditions.append(User.username == username)
        if email:
            conditions.append(User.email == email.strip().lower())
        if not conditions:
            return None
        return self.session.query(User).filter(or_(*conditions)).first()

    def get_by_session_id(self, session_id: str) -> Optional[User]:
        return self.session.query(User).filter(User.session_id == session_id).one_or_none()

    def is_username_taken(self, username: str, exclude_user_id: Optional[int] = None) -> bool:
        query = self.session.query(User).filter(User.username == username)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return self.session.query(query.exists()).scalar()

    def is_email_taken(self, email: str, exclude_user_id: Optional[int] = None) -> bool:
        query = self.session.query(User).filter(User.email == email.strip().lower())
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return self.session.query(query.exists()).scalar()

    def set_session(self, user: User, session_id: Optional[str]) -> User:
        """Replace the user's session token and stamp the activity time.

        Passing None clears the session (logout).
        """
        user.session_id = session_id
        user.last_active = datetime.now(UTC) if session_id else None
        return user

    def touch(self, user: User) -> User:
        user.last_active = datetime.now(UTC)
        return user

    def count_users(self) -> int:
        """Get the total number of users.

        Returns:
            Total number of users in the database
        """
        return self.session.query(User).count()

    def search_users(self, query: str, limit: int = 20, offset: int = 0) -> List[User]:
        """Search for users by username.

        Args:
            query: The search query string
            limit: Maximum number of results to return (default: 20)
            offset: Number of records to skip (default: 0)

        Returns:
            List of matching User objects
        """
        base_query = self.session.query(User)
        if query:
            base_query = base_query.filter(User.username.ilike(f"%{query}%"))
        return base_query.order_by(User.id).offset(offset).limit(limit).all()

    def delete_user(self, user: User) -> None:
        self.session.delete(user)
