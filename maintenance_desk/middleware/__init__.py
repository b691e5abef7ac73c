"""
Request middleware and dependencies
"""
from .auth import get_current_actor
from .cors import get_cors_origins

__all__ = ["get_current_actor", "get_cors_origins"]
