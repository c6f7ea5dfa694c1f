# core/utils/ids.py
import logging
import secrets
from typing import Callable

from core.config import ID_MAX_ATTEMPTS
from core.exceptions import IdExhaustion

logger = logging.getLogger(__name__)

# Uppercase letters and digits without the look-alikes I, O, 0 and 1
ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ID_LENGTH = 6

USER_PREFIX = "USR"
BOOK_PREFIX = "BK"


class IdGenerator:
    """Generates short, human readable display ids such as ``BK-7F3K9Q``."""

    def __init__(self, alphabet: str = ALPHABET, length: int = ID_LENGTH):
        self.alphabet = alphabet
        self.length = length

    def generate(self, prefix: str) -> str:
        suffix = "".join(secrets.choice(self.alphabet) for _ in range(self.length))
        return f"{prefix.upper()}-{suffix}"

    def create_unique(
        self,
        prefix: str,
        exists: Callable[[str], bool],
        max_attempts: int = ID_MAX_ATTEMPTS,
    ) -> str:
        """Generate ids until one is not reported as taken.

        Args:
            prefix: Id prefix, e.g. "BK" or "USR"
            exists: Predicate returning True when a candidate is already in use
            max_attempts: Number of candidates to try before giving up

        Returns:
            An id for which ``exists`` returned False

        Raises:
            IdExhaustion: If every candidate was taken
        """
        for attempt in range(1, max_attempts + 1):
            candidate = self.generate(prefix)
            if not exists(candidate):
                return candidate
            logger.warning(f"Display id collision on {candidate} (attempt {attempt}/{max_attempts})")
        raise IdExhaustion(prefix, max_attempts)

    def is_valid(self, value: str, prefix: str) -> bool:
        head, sep, suffix = value.partition("-")
        return (
            sep == "-"
            and head == prefix.upper()
            and len(suffix) == self.length
            and all(c in self.alphabet for c in suffix)
        )


id_generator = IdGenerator()
