from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional

from .common import FullName, Password, UrlStr, Username


class UserCreate(BaseModel):
    username: Username
    email: EmailStr
    password_hash: Password
    full_name: Optional[FullName] = None
    profile_image_url: Optional[UrlStr] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if len(value) > 100:
            raise ValueError("email must be at most 100 characters")
        return value


class UserLogin(BaseModel):
    email: Optional[str] = None
    password_hash: Optional[str] = None


class AuthResponse(BaseModel):
    user: dict
    auth_token: str
