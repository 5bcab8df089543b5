"""User record as it travels between the store and the handlers."""

from dataclasses import dataclass, asdict
from typing import Any, Mapping


@dataclass
class User:
    id: int
    name: str
    age: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        """Build from a sqlite3.Row (or any mapping with id, name, age)."""
        return cls(id=row["id"], name=row["name"], age=row["age"])
