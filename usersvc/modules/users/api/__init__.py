"""
REST API Endpoints

Thin API layer that delegates to the user repository.
"""

from .user_endpoints import router as user_router

__all__ = [
    "user_router",
]
