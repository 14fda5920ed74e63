"""
Partial-update value type.

A Patch maps column names to new values for the fields a client actually
sent. Omitted fields are absent from the mapping; an explicit null is kept
as None so that nullable columns can be cleared.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel
from sqlalchemy import update
from sqlalchemy.orm import Session


@dataclass(frozen=True)
class Patch:
    values: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_model(
        cls,
        data: BaseModel,
        transforms: Optional[Dict[str, Callable[[Any], Any]]] = None,
    ) -> "Patch":
        """Build a patch from the fields explicitly set on a validated schema."""
        transforms = transforms or {}
        values = {}
        for name, value in data.model_dump(exclude_unset=True).items():
            if value is not None and name in transforms:
                value = transforms[name](value)
            values[name] = value
        return cls(values)

    @property
    def is_empty(self) -> bool:
        return not self.values

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def apply(self, db: Session, model, *criteria) -> int:
        """
        Run one parameterized UPDATE against ``model`` rows matching ``criteria``.

        Column names come from the model's mapped attributes, never from
        string formatting. Returns the number of rows matched.
        """
        if self.is_empty:
            return 0
        columns = {getattr(model, name): value for name, value in self.values.items()}
        stmt = update(model).where(*criteria).values(columns).execution_options(synchronize_session="fetch")
        result = db.execute(stmt)
        return result.rowcount
