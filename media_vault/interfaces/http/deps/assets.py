"""Asset related dependency providers."""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from media_vault.core.config import get_settings
from media_vault.modules.assets import AssetService, BlobStore, LocalBlobStore

from .database import get_db_session


@lru_cache()
def get_blob_store() -> BlobStore:
    store = LocalBlobStore.from_settings(get_settings())
    store.ensure_storage()
    return store


def get_asset_service(
    db: AsyncSession = Depends(get_db_session),
    blob_store: BlobStore = Depends(get_blob_store),
) -> AssetService:
    return AssetService.with_session(db, blob_store)


__all__ = [
    "get_asset_service",
    "get_blob_store",
]
