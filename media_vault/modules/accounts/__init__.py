"""Contributor account exports."""

from .exceptions import AccountAlreadyExistsError, AccountError, AccountNotFoundError
from .models import Account, AccountCreateInput
from .passwords import PasswordHasher
from .service import AccountService

__all__ = [
    "Account",
    "AccountAlreadyExistsError",
    "AccountCreateInput",
    "AccountError",
    "AccountNotFoundError",
    "AccountService",
    "PasswordHasher",
]
