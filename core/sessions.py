# core/sessions.py
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, UTC
from typing import Optional

from core.config import SESSION_TTL_HOURS
from core.sa.models.base import as_utc

PBKDF2_ITERATIONS = 240_000


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Hash a password as ``pbkdf2_sha256$iterations$salt$hex``"""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        algorithm, iterations, salt, expected = stored.split("$")
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)


def new_session_token() -> str:
    return secrets.token_hex(32)


def is_expired(last_active: Optional[datetime], ttl_hours: int = SESSION_TTL_HOURS, now: Optional[datetime] = None) -> bool:
    if last_active is None:
        return True
    now = now or datetime.now(UTC)
    return now - as_utc(last_active) > timedelta(hours=ttl_hours)
