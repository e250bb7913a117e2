"""Use cases for managing staff users."""

from .authenticate_user import AuthenticationStatus, authenticate_user
from .create_user import create_user
from .get_user import get_user
from .update_user import update_user

__all__ = [
    "AuthenticationStatus",
    "authenticate_user",
    "create_user",
    "get_user",
    "update_user",
]
