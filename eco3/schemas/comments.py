from pydantic import BaseModel, model_validator
from typing import Literal, Optional

from .common import CommentText, Id, reject_explicit_nulls

CommentSortField = Literal["content", "created_at"]


class CommentCreate(BaseModel):
    user_id: Id
    post_id: Id
    content: CommentText


class CommentUpdate(BaseModel):
    user_id: Optional[Id] = None
    post_id: Optional[Id] = None
    content: Optional[CommentText] = None

    @model_validator(mode="after")
    def non_nullable_fields(self):
        # comments.content is NOT NULL, so null is rejected here rather than at the database
        reject_explicit_nulls(self, ("user_id", "post_id", "content"))
        return self
