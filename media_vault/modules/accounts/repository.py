"""Repository protocol for contributor accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .models import Account


class AccountRepository(Protocol):
    """Persistence needed to resolve bearer tokens and register contributors.

    Asset ownership is keyed on ``Account.id``; usernames only matter at
    login and registration.
    """

    async def get_by_id(self, account_id: str) -> Account | None:
        """Resolve the account named in an access token."""

    async def get_by_username(self, username: str) -> Account | None:
        """Look up a login name, case-sensitively."""

    async def create_account(
        self,
        *,
        username: str,
        password_hash: str,
        is_active: bool,
    ) -> Account:
        """Insert a new account. Callers check username uniqueness first."""

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        ...
