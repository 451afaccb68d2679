"""Domain models."""

from .user import NewUser, User, UserList

__all__ = ["NewUser", "User", "UserList"]
