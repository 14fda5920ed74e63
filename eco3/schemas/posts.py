from pydantic import BaseModel, model_validator
from typing import Literal, Optional

from .common import Id, Title, UrlStr, reject_explicit_nulls

PostSortField = Literal["title", "created_at"]


class PostCreate(BaseModel):
    user_id: Id
    title: Title
    content: Optional[str] = None
    image_url: Optional[UrlStr] = None


class PostUpdate(BaseModel):
    user_id: Optional[Id] = None
    title: Optional[Title] = None
    content: Optional[str] = None
    image_url: Optional[UrlStr] = None

    @model_validator(mode="after")
    def non_nullable_fields(self):
        reject_explicit_nulls(self, ("user_id", "title", "image_url"))
        return self
