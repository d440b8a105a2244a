from datetime import datetime, timedelta, timezone

from media_vault.modules.assets import Asset, BlobStoreError, PersistenceError, UploadPayload


def payload(data: bytes = b"\x89PNG fake image", filename: str | None = "sunset.png",
            content_type: str | None = "image/png") -> UploadPayload:
    return UploadPayload.from_bytes(data, filename=filename, content_type=content_type)


class StepClock:
    """Returns strictly increasing UTC timestamps, one minute apart."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(minutes=1)
        return value


class FlakyRepository:
    """Delegates to a real repository, failing writes on demand."""

    def __init__(self, inner):
        self.inner = inner
        self.fail_save = False
        self.fail_delete = False

    def __getattr__(self, name):
        return getattr(self.inner, name)

    async def save(self, asset: Asset) -> Asset:
        if self.fail_save:
            raise PersistenceError("metadata store unavailable")
        return await self.inner.save(asset)

    async def delete(self, asset: Asset) -> None:
        if self.fail_delete:
            raise PersistenceError("metadata store unavailable")
        await self.inner.delete(asset)


class FlakyBlobStore:
    """Delegates to a real blob store, failing operations on demand."""

    def __init__(self, inner):
        self.inner = inner
        self.fail_store = False
        self.fail_delete = False
        self.deleted: list[str] = []

    def __getattr__(self, name):
        return getattr(self.inner, name)

    async def store(self, payload: UploadPayload) -> str:
        if self.fail_store:
            raise BlobStoreError("disk full")
        return await self.inner.store(payload)

    async def retrieve(self, reference: str):
        return await self.inner.retrieve(reference)

    async def delete(self, reference: str) -> None:
        if self.fail_delete:
            raise BlobStoreError("permission denied")
        await self.inner.delete(reference)
        self.deleted.append(reference)
