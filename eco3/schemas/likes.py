from typing import Literal

from pydantic import BaseModel

from .common import Id

LikeSortField = Literal["created_at"]


class LikeCreate(BaseModel):
    user_id: Id
    post_id: Id
