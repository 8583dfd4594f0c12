"""
Data Access Layer (Repositories)

Repositories handle all document store interactions.
"""

from .user_repository import UserRepository

__all__ = [
    "UserRepository",
]
