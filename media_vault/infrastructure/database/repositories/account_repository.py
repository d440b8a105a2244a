"""SQLAlchemy implementation for the account repository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from media_vault.db.models import Account as AccountModel
from media_vault.modules.accounts.models import Account


class SqlAccountRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, account_id: str) -> Account | None:
        model = await self.session.get(AccountModel, account_id)
        return self._to_domain(model) if model else None

    async def get_by_username(self, username: str) -> Account | None:
        stmt = select(AccountModel).where(AccountModel.username == username)
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def create_account(
        self,
        *,
        username: str,
        password_hash: str,
        is_active: bool,
    ) -> Account:
        model = AccountModel(
            username=username,
            password_hash=password_hash,
            is_active=is_active,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_domain(model)

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(last_login_at=timestamp)
        )
        await self.session.execute(stmt)

    @staticmethod
    def _to_domain(model: AccountModel) -> Account:
        return Account(
            id=model.id,
            username=model.username,
            is_active=model.is_active,
            password_hash=model.password_hash,
            created_at=model.created_at,
            last_login_at=model.last_login_at,
        )
