# api/schemas/user.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, model_validator

class UserSummary(BaseModel):
    """How a user appears inside other resources"""
    id: int
    display_id: str
    username: str

    model_config = ConfigDict(from_attributes=True)

class User(UserSummary):
    email: str
    last_active: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class SignupRequest(BaseModel):
    username: str
    email: str
    password: str

class LoginRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: str

    @model_validator(mode='after')
    def require_identifier(self):
        if not self.username and not self.email:
            raise ValueError("username or email is required")
        return self

class ProfileUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class AuthResponse(BaseModel):
    user: User
    token: str

class MessageResponse(BaseModel):
    message: str
