"""Media asset domain exports."""

from .exceptions import (
    AssetError,
    BlobNotFoundError,
    BlobStoreError,
    ContentTooLargeError,
    PersistenceError,
    RejectedContentError,
)
from .models import Asset, UploadPayload, UNSET
from .service import AssetService
from .storage import BlobStore, LocalBlobStore, normalize_content_type

__all__ = [
    "Asset",
    "AssetError",
    "AssetService",
    "BlobNotFoundError",
    "BlobStore",
    "BlobStoreError",
    "ContentTooLargeError",
    "LocalBlobStore",
    "PersistenceError",
    "RejectedContentError",
    "UNSET",
    "UploadPayload",
    "normalize_content_type",
]
