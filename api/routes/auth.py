# api/routes/auth.py

from typing import Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from core.config import COOKIE_SECURE, SESSION_TTL_HOURS
from core.sa.database import get_db
from core.sa.repositories.user import UserRepository
from core.services.user_service import UserService
from api.dependencies import SESSION_COOKIE, get_session_token
from api.schemas.user import AuthResponse, LoginRequest, MessageResponse, SignupRequest, User

router = APIRouter(prefix="/auth", tags=["auth"])

def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        token,
        httponly=True,
        secure=COOKIE_SECURE,
        max_age=SESSION_TTL_HOURS * 60 * 60
    )

@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, response: Response, db: Session = Depends(get_db)):
    """Create an account and start a session.

    The token is returned in the body for non-browser clients and set as the
    session cookie for browsers.
    """
    user, token = UserService(db).signup(body.username, body.email, body.password)
    _set_session_cookie(response, token)
    return AuthResponse(user=User.model_validate(user), token=token)

@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user, token = UserService(db).login(body.password, username=body.username, email=body.email)
    _set_session_cookie(response, token)
    return AuthResponse(user=User.model_validate(user), token=token)

@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db)
):
    if token:
        user = UserRepository(db).get_by_session_id(token)
        if user is not None:
            UserService(db).logout(user)
    response.delete_cookie(SESSION_COOKIE)
    return MessageResponse(message="Logged out successfully")
