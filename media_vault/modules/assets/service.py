"""Asset service coordinating blob storage and metadata persistence.

The two stores are not jointly transactional. Writes are ordered so that a
partial failure can only leave an orphaned blob, never a record whose
reference points at missing content:

* create: blob write, then metadata insert
* delete: blob removal, then metadata removal
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import BinaryIO, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from media_vault.core.config import get_settings

from .exceptions import PersistenceError
from .models import DEFAULT_CONTENT_TYPE, UNSET, UNTITLED_FILENAME, Asset, UploadPayload
from .repository import AssetRepository
from .storage import BlobStore, LocalBlobStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class AssetService:
    repository: AssetRepository
    blob_store: BlobStore
    clock: Callable[[], datetime] = field(default=_utcnow)

    @classmethod
    def with_session(cls, session: AsyncSession, blob_store: BlobStore | None = None) -> "AssetService":
        from media_vault.infrastructure.database.repositories.asset_repository import SqlAssetRepository

        if blob_store is None:
            blob_store = LocalBlobStore.from_settings(get_settings())
        return cls(SqlAssetRepository(session), blob_store)

    async def create(
        self,
        payload: UploadPayload,
        *,
        owner_id: str,
        title: str | None = None,
        description: str | None = None,
    ) -> Asset:
        """Store uploaded content and record it for ``owner_id``.

        Raises:
            RejectedContentError: the blob store refused the content; nothing was written.
            BlobStoreError: the content could not be written; no record exists.
            PersistenceError: the record could not be saved. The written blob is
                left in place as an orphan.
        """
        if not owner_id:
            raise ValueError("owner_id is required")

        reference = await self.blob_store.store(payload)
        asset = Asset(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=payload.filename or UNTITLED_FILENAME,
            content_type=payload.content_type or DEFAULT_CONTENT_TYPE,
            reference=reference,
            created_at=self.clock(),
            title=title,
            description=description,
        )
        try:
            saved = await self.repository.save(asset)
        except PersistenceError:
            logger.warning("Orphaned blob %s: metadata for asset %s was not saved", reference, asset.id)
            raise
        logger.info("Created asset %s for owner %s", saved.id, owner_id)
        return saved

    async def delete(self, asset: Asset) -> None:
        """Remove the content and then the record of an already authorised asset.

        If the blob cannot be removed the record is left untouched and the call
        may be retried.
        """
        try:
            await self.blob_store.delete(asset.reference)
        except Exception:
            logger.error("Failed to delete blob %s of asset %s; record kept", asset.reference, asset.id)
            raise
        # Unconditional: the caller has already checked ownership.
        await self.repository.delete(asset)
        logger.info("Deleted asset %s", asset.id)

    async def get(self, asset_id: str, owner_id: str | None = None) -> Asset | None:
        """Return the asset, or ``None``.

        With ``owner_id`` the asset is returned only when it belongs to that
        owner; a foreign asset is reported exactly like a missing one.
        """
        if owner_id is None:
            return await self.repository.get_by_id(asset_id)
        return await self.repository.get_by_id_and_owner(asset_id, owner_id)

    async def search(self, owner_id: str | None = None, fragment: str | None = None) -> list[Asset]:
        if owner_id is not None and fragment is not None:
            assets = await self.repository.list_by_owner_and_fragment(owner_id, fragment)
        elif owner_id is not None:
            assets = await self.repository.list_by_owner(owner_id)
        elif fragment is not None:
            assets = await self.repository.list_by_fragment(fragment)
        else:
            assets = await self.repository.list_all()
        return list(assets)

    async def list(self) -> list[Asset]:
        return list(await self.repository.list_all())

    async def retrieve(self, asset: Asset) -> BinaryIO:
        return await self.blob_store.retrieve(asset.reference)

    async def save(self, asset: Asset) -> Asset:
        return await self.repository.save(asset)

    async def update_details(
        self,
        asset: Asset,
        *,
        title: Optional[str] | object = UNSET,
        description: Optional[str] | object = UNSET,
    ) -> Asset:
        changes = {}
        if title is not UNSET:
            changes["title"] = title
        if description is not UNSET:
            changes["description"] = description
        if not changes:
            return asset
        return await self.save(dataclasses.replace(asset, **changes))
