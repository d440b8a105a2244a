"""Blob storage for uploaded asset content."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Iterable, Protocol

from media_vault.core.config import Settings

from .exceptions import BlobNotFoundError, BlobStoreError, ContentTooLargeError, RejectedContentError
from .models import DEFAULT_CONTENT_TYPE, UploadPayload

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
MAX_SUFFIX_LENGTH = 10


class BlobStore(Protocol):
    """Interface for binary content backends."""

    async def store(self, payload: UploadPayload) -> str:
        """Persist the payload and return an opaque reference to it.

        Raises:
            RejectedContentError: the declared content type or size is not accepted.
            BlobStoreError: the content could not be written.
        """
        ...

    async def retrieve(self, reference: str) -> BinaryIO:
        """Open previously stored content for reading. The caller closes the handle."""
        ...

    async def delete(self, reference: str) -> None:
        ...


def normalize_content_type(content_type: str | None) -> str:
    if not content_type:
        return DEFAULT_CONTENT_TYPE
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type or DEFAULT_CONTENT_TYPE


def is_content_type_allowed(content_type: str, allowed: Iterable[str]) -> bool:
    major = content_type.split("/", 1)[0]
    for pattern in allowed:
        pattern = pattern.strip().lower()
        if pattern in {"*", "*/*"} or pattern == content_type:
            return True
        if pattern.endswith("/*") and pattern[:-2] == major:
            return True
    return False


def _safe_suffix(filename: str | None) -> str:
    if not filename:
        return ""
    suffix = PurePosixPath(filename.replace("\\", "/")).suffix.lower()
    if len(suffix) > MAX_SUFFIX_LENGTH or not suffix[1:].isalnum():
        return ""
    return suffix


class LocalBlobStore:
    """Stores blobs as files below a root directory.

    References are POSIX paths relative to the root, sharded by the first two
    characters of a random token (``ab/ab12...ef.png``).
    """

    def __init__(
        self,
        root: Path,
        *,
        allowed_content_types: Iterable[str],
        max_upload_bytes: int,
    ) -> None:
        self._root = Path(root).resolve()
        self._allowed_content_types = tuple(allowed_content_types)
        self._max_upload_bytes = max_upload_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalBlobStore":
        return cls(
            Path(settings.blob_storage_dir),
            allowed_content_types=settings.storage.allowed_content_types,
            max_upload_bytes=settings.storage.max_upload_bytes,
        )

    @property
    def root(self) -> Path:
        return self._root

    def ensure_storage(self) -> None:
        """Create the storage root if it does not exist."""
        self._root.mkdir(parents=True, exist_ok=True)

    async def store(self, payload: UploadPayload) -> str:
        content_type = normalize_content_type(payload.content_type)
        if not is_content_type_allowed(content_type, self._allowed_content_types):
            logger.info("Rejected upload %r with content type %s", payload.filename, content_type)
            raise RejectedContentError(f"Content type not accepted: {content_type}", content_type)
        return await asyncio.to_thread(self._write, payload)

    async def retrieve(self, reference: str) -> BinaryIO:
        return await asyncio.to_thread(self._open, reference)

    async def delete(self, reference: str) -> None:
        await asyncio.to_thread(self._unlink, reference)

    async def exists(self, reference: str) -> bool:
        try:
            path = self._resolve(reference)
        except BlobNotFoundError:
            return False
        return await asyncio.to_thread(path.is_file)

    def _write(self, payload: UploadPayload) -> str:
        token = os.urandom(16).hex()
        reference = PurePosixPath(token[:2]) / f"{token}{_safe_suffix(payload.filename)}"
        target = self._root / reference
        total_size = 0

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # Exclusive create: a reference is never handed out twice.
            with target.open("xb") as buffer:
                while True:
                    chunk = payload.stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    total_size += len(chunk)
                    if total_size > self._max_upload_bytes:
                        raise ContentTooLargeError(
                            f"Upload exceeds {self._max_upload_bytes} bytes",
                            self._max_upload_bytes,
                        )
                    buffer.write(chunk)
        except ContentTooLargeError:
            self._discard(target)
            raise
        except OSError as exc:
            self._discard(target)
            raise BlobStoreError(f"Unable to write blob {reference}") from exc

        logger.debug("Stored blob %s (%d bytes)", reference, total_size)
        return reference.as_posix()

    def _open(self, reference: str) -> BinaryIO:
        path = self._resolve(reference)
        try:
            return path.open("rb")
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise BlobNotFoundError(f"No blob stored at {reference}") from exc
        except OSError as exc:
            raise BlobStoreError(f"Unable to read blob {reference}") from exc

    def _unlink(self, reference: str) -> None:
        path = self._resolve(reference)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise BlobNotFoundError(f"No blob stored at {reference}") from exc
        except OSError as exc:
            raise BlobStoreError(f"Unable to delete blob {reference}") from exc
        logger.debug("Deleted blob %s", reference)

    def _resolve(self, reference: str) -> Path:
        if not reference:
            raise BlobNotFoundError("Empty blob reference")
        path = (self._root / reference).resolve()
        if self._root not in path.parents:
            raise BlobNotFoundError(f"Reference outside storage root: {reference}")
        return path

    @staticmethod
    def _discard(path: Path) -> None:
        with contextlib.suppress(OSError):
            path.unlink(missing_ok=True)


__all__ = [
    "BlobStore",
    "LocalBlobStore",
    "is_content_type_allowed",
    "normalize_content_type",
]
