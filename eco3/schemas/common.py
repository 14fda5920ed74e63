from typing import Annotated, Iterable, Optional

from fastapi import Path, Query
from pydantic import AfterValidator, BaseModel, Field, HttpUrl, StringConstraints

# Largest value an SQLite INTEGER column holds
MAX_ID = 2 ** 63 - 1

Id = Annotated[int, Field(ge=1, le=MAX_ID)]
IdPath = Annotated[int, Path(ge=1, le=MAX_ID)]
IdFilter = Annotated[Optional[int], Query(ge=1, le=MAX_ID)]

UrlStr = Annotated[HttpUrl, AfterValidator(str)]
Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
FullName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]
Password = Annotated[str, StringConstraints(min_length=8)]
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
CommentText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def reject_explicit_nulls(model: BaseModel, fields: Iterable[str]) -> None:
    """Partial updates may omit these fields but may not set them to null."""
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{name} cannot be null")


def blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value
