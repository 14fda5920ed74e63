from pydantic import BaseModel, EmailStr, field_validator, model_validator
from typing import Literal, Optional

from .common import FullName, Password, UrlStr, Username, reject_explicit_nulls

UserSortField = Literal["username", "email", "full_name", "created_at"]


class UserUpdate(BaseModel):
    username: Optional[Username] = None
    email: Optional[EmailStr] = None
    password_hash: Optional[Password] = None
    full_name: Optional[FullName] = None
    profile_image_url: Optional[UrlStr] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip().lower()
        if len(value) > 100:
            raise ValueError("email must be at most 100 characters")
        return value

    @model_validator(mode="after")
    def non_nullable_fields(self):
        reject_explicit_nulls(self, ("username", "email", "password_hash", "profile_image_url"))
        return self
