"""SQLAlchemy implementation for the asset metadata repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import Select, delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from media_vault.db.models import Asset as AssetModel
from media_vault.modules.assets.exceptions import PersistenceError
from media_vault.modules.assets.models import Asset


class SqlAssetRepository:
    """Asset records in a relational database.

    ``save`` and ``delete`` commit their own transaction so the metadata step
    is durable by the time the caller moves on.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, asset_id: str) -> Asset | None:
        stmt = select(AssetModel).where(AssetModel.id == asset_id)
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def get_by_id_and_owner(self, asset_id: str, owner_id: str) -> Asset | None:
        stmt = (
            select(AssetModel)
            .where(AssetModel.id == asset_id)
            .where(AssetModel.owner_id == owner_id)
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def list_by_owner(self, owner_id: str) -> Sequence[Asset]:
        stmt = select(AssetModel).where(AssetModel.owner_id == owner_id)
        return await self._fetch(stmt)

    async def list_by_fragment(self, fragment: str) -> Sequence[Asset]:
        stmt = select(AssetModel).where(self._matches(fragment))
        return await self._fetch(stmt)

    async def list_by_owner_and_fragment(self, owner_id: str, fragment: str) -> Sequence[Asset]:
        stmt = (
            select(AssetModel)
            .where(AssetModel.owner_id == owner_id)
            .where(self._matches(fragment))
        )
        return await self._fetch(stmt)

    async def list_all(self) -> Sequence[Asset]:
        return await self._fetch(select(AssetModel))

    async def save(self, asset: Asset) -> Asset:
        try:
            model = await self.session.get(AssetModel, asset.id)
            if model is None:
                model = AssetModel(
                    id=asset.id,
                    owner_id=asset.owner_id,
                    name=asset.name,
                    content_type=asset.content_type,
                    reference=asset.reference,
                    title=asset.title,
                    description=asset.description,
                    created_at=asset.created_at,
                )
                self.session.add(model)
            else:
                # Only the descriptive fields are editable after creation.
                model.title = asset.title
                model.description = asset.description
            await self.session.flush()
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceError(f"Unable to save asset {asset.id}") from exc
        return self._to_domain(model)

    async def delete(self, asset: Asset) -> None:
        stmt = delete(AssetModel).where(AssetModel.id == asset.id)
        try:
            await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceError(f"Unable to delete asset {asset.id}") from exc

    async def _fetch(self, stmt: Select) -> list[Asset]:
        stmt = stmt.order_by(AssetModel.created_at.desc(), AssetModel.id)
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _matches(fragment: str):
        return or_(
            AssetModel.title.icontains(fragment, autoescape=True),
            AssetModel.description.icontains(fragment, autoescape=True),
        )

    @staticmethod
    def _to_domain(model: AssetModel) -> Asset:
        return Asset(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            content_type=model.content_type,
            reference=model.reference,
            created_at=_as_utc(model.created_at),
            title=model.title,
            description=model.description,
        )


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
