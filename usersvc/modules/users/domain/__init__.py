"""
Domain Models

User entity and the result type returned by the repository.
"""

from .user import User, UserUpdate
from .result import UserResult, UserResultStatus

__all__ = [
    "User",
    "UserUpdate",
    "UserResult",
    "UserResultStatus",
]
