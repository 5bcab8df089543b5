"""
The /users resource: model, input rules and HTTP handlers.
"""

from .models import User
from .validation import UserInput, validate_user, MAX_NAME_LENGTH, MIN_AGE, MAX_AGE
from .handler import UserHandler

__all__ = [
    "User",
    "UserInput",
    "validate_user",
    "MAX_NAME_LENGTH",
    "MIN_AGE",
    "MAX_AGE",
    "UserHandler",
]
