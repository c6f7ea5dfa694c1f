# core/exceptions.py
from typing import Optional


class LendingError(Exception):
    """Base class for errors raised by the lending core"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LendingError):
    """Malformed or out-of-range input"""


class InvalidRating(ValidationError):
    def __init__(self, rating):
        super().__init__(f"Rating must be an integer between 1 and 5, got {rating!r}")
        self.rating = rating


class InvalidTransition(LendingError):
    """A lifecycle precondition was not met.

    Carries the book status at the time of the attempt and the attempted action
    so callers can report both.
    """

    def __init__(self, status: str, action: str, reason: Optional[str] = None):
        message = f"Cannot {action} while book is {status}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.status = status
        self.action = action
        self.reason = reason


class NotAuthorized(LendingError):
    """Caller lacks the required relationship to the resource"""


class AuthenticationError(LendingError):
    """Missing, unknown or expired credentials"""


class NotFound(LendingError):
    def __init__(self, entity: str, ref):
        super().__init__(f"{entity} not found: {ref}")
        self.entity = entity
        self.ref = ref


class ConflictError(LendingError):
    """Uniqueness violation (duplicate username, email, ...)"""


class IdExhaustion(LendingError):
    def __init__(self, prefix: str, attempts: int):
        super().__init__(f"Failed to generate a unique {prefix} id after {attempts} attempts")
        self.prefix = prefix
        self.attempts = attempts
