"""Domain services for contributor accounts."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from media_vault.core.config import get_settings

from .exceptions import AccountAlreadyExistsError, AccountNotFoundError
from .models import Account, AccountCreateInput
from .passwords import PasswordHasher
from .repository import AccountRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Encapsulates registration and authentication of contributors."""

    def __init__(self, repository: AccountRepository, hasher: PasswordHasher | None = None) -> None:
        self._repository = repository
        self._hasher = hasher or PasswordHasher(rounds=get_settings().security.bcrypt_rounds)

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AccountService":
        from media_vault.infrastructure.database.repositories.account_repository import SqlAccountRepository

        return cls(SqlAccountRepository(session))

    async def get_by_id(self, account_id: str) -> Account | None:
        return await self._repository.get_by_id(account_id)

    async def authenticate(self, username: str, password: str) -> Account | None:
        account = await self._repository.get_by_username(username)
        if account is None or not account.is_active:
            return None
        if not self._hasher.verify(password, account.password_hash):
            return None
        return account

    async def create_account(self, payload: AccountCreateInput) -> Account:
        existing = await self._repository.get_by_username(payload.username)
        if existing is not None:
            raise AccountAlreadyExistsError(f"Username already taken: {payload.username}")

        account = await self._repository.create_account(
            username=payload.username,
            password_hash=self._hasher.hash(payload.password),
            is_active=payload.is_active,
        )
        logger.info("Registered account %s (%s)", account.id, account.username)
        return account

    async def set_last_login(self, account_id: str) -> None:
        if await self._repository.get_by_id(account_id) is None:
            raise AccountNotFoundError(account_id)
        await self._repository.set_last_login(account_id, datetime.now(timezone.utc))
