# api/dependencies.py
from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from core.sa.database import get_db
from core.sa.models import User
from core.services.user_service import UserService

SESSION_COOKIE = "session_id"

def get_session_token(
    request: Request,
    authorization: Optional[str] = Header(default=None)
) -> Optional[str]:
    """Read the session token from a Bearer header or the session cookie"""
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer "):].strip() or None
    return request.cookies.get(SESSION_COOKIE)

def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db)
) -> User:
    """Authenticated caller for the request.

    Raises AuthenticationError (401) when there is no valid session. Tests
    swap this dependency out to act as a given user.
    """
    return UserService(db).authenticate(token)
