"""
=============================================================================
USER INPUT DECODING AND VALIDATION
=============================================================================

Two separate steps run on every POST and PUT body:

    request.json ──► UserInput.from_json() ──► validate_user() ──► store
                        │                          │
                 shape: object with          policy: 1 <= len(name) <= 100
                 str name, int age                   0 <= age < 200
                        │                          │
                        └──── ValidationError (400) ┘

Decoding always runs. The policy check can be switched off
(``validate_users=False``), which stores whatever name and age the
client sends as long as they have the right types.

=============================================================================
"""

from dataclasses import dataclass
from typing import Any

from ..errors import ValidationError


MAX_NAME_LENGTH = 100
MIN_AGE = 0
MAX_AGE = 200       # exclusive

# SQLite INTEGER is a signed 64-bit value
MAX_STORED_INTEGER = 2 ** 63 - 1


@dataclass
class UserInput:
    """Decoded body of a create or update request."""

    name: str
    age: int

    @classmethod
    def from_json(cls, data: Any) -> "UserInput":
        """
        Check the shape of a decoded JSON body.

        Raises:
            ValidationError: If ``data`` is not an object with a string
                ``name`` and an integer ``age`` that fits a 64-bit column.
        """
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

        name = data.get("name")
        age = data.get("age")

        if not isinstance(name, str):
            raise ValidationError("Field 'name' must be a string")
        # bool is an int subclass; true/false is not an age
        if isinstance(age, bool) or not isinstance(age, int):
            raise ValidationError("Field 'age' must be an integer")
        if not -MAX_STORED_INTEGER - 1 <= age <= MAX_STORED_INTEGER:
            raise ValidationError("Field 'age' is out of range")

        return cls(name=name, age=age)


def validate_user(name: str, age: int) -> None:
    """
    Apply the name and age rules.

    Raises:
        ValidationError: On the first rule that fails.
    """
    if not name:
        raise ValidationError("Name must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Name must be at most {MAX_NAME_LENGTH} characters")
    if not MIN_AGE <= age < MAX_AGE:
        raise ValidationError(f"Age must be between {MIN_AGE} and {MAX_AGE - 1}")
