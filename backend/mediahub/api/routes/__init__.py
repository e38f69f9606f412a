"""Route modules for the MediaHub API."""
from . import admin, auth, users

__all__ = ["admin", "auth", "users"]
