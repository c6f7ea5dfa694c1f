# core/sa/repositories/base.py
import logging
from typing import TypeVar, Generic, Optional, Type, Callable
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.config import ID_MAX_ATTEMPTS
from core.exceptions import ConflictError, IdExhaustion
from core.sa.models import Base
from core.utils.ids import id_generator

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Base)

def is_display_id_conflict(error: IntegrityError) -> bool:
    """Whether an IntegrityError came from a display_id unique constraint.

    SQLite reports the column ("UNIQUE constraint failed: book.display_id"),
    PostgreSQL the constraint and key ("book_display_id_key", "Key (display_id)=").
    """
    return "display_id" in str(error.orig)

class BaseRepository(Generic[T]):
    model: Type[T]
    id_prefix: str

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id_value: int) -> Optional[T]:
        return self.session.get(self.model, id_value)

    def get_by_display_id(self, display_id: str) -> Optional[T]:
        return (
            self.session.query(self.model)
            .filter(self.model.display_id == display_id)
            .one_or_none()
        )

    def display_id_exists(self, display_id: str) -> bool:
        return self.get_by_display_id(display_id) is not None

    def _insert_with_display_id(
        self,
        build: Callable[[str], T],
        conflict_message: str,
        max_attempts: int = ID_MAX_ATTEMPTS
    ) -> T:
        """Insert a new row under a freshly generated display id.

        Candidates are pre-checked against the table, but the unique constraint
        decides: a display_id violation on commit means another request took the
        id first, so a new one is generated. Any other violation is a conflict.

        Args:
            build: Creates the (transient) row for a given display id
            conflict_message: Message for a non display id uniqueness violation
            max_attempts: Insert attempts before giving up

        Returns:
            The committed row

        Raises:
            ConflictError: On any other unique constraint violation
            IdExhaustion: If every attempt collided
        """
        for attempt in range(1, max_attempts + 1):
            display_id = id_generator.create_unique(
                self.id_prefix, self.display_id_exists, max_attempts=max_attempts
            )
            row = build(display_id)
            self.session.add(row)
            try:
                self.session.commit()
                return row
            except IntegrityError as e:
                self.session.rollback()
                if not is_display_id_conflict(e):
                    raise ConflictError(conflict_message) from e
                logger.warning(
                    f"Display id {display_id} taken on insert, retrying ({attempt}/{max_attempts})"
                )
        raise IdExhaustion(self.id_prefix, max_attempts)
