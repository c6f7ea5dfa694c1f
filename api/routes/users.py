# api/routes/users.py

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from core.sa.database import get_db
from core.sa.models import User
from core.services.user_service import UserService
from api.dependencies import SESSION_COOKIE, get_current_user
from api.schemas.user import MessageResponse, ProfileUpdate, User as UserSchema

router = APIRouter(prefix="/user", tags=["users"])

@router.get("/profile", response_model=UserSchema)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user

@router.put("/profile", response_model=UserSchema)
def update_profile(
    body: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return UserService(db).update_profile(
        current_user,
        username=body.username,
        email=body.email,
        password=body.password
    )

@router.delete("/account", response_model=MessageResponse)
def delete_account(
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete the caller's account.

    Refused with 400 while the caller borrows a book or has one lent out.
    """
    UserService(db).delete_account(current_user)
    response.delete_cookie(SESSION_COOKIE)
    return MessageResponse(message="Account deleted successfully")
