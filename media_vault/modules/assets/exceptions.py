"""Asset domain specific exceptions."""


class AssetError(Exception):
    """Base class for asset domain errors."""


class BlobStoreError(AssetError):
    """Raised when blob content cannot be written, read or removed."""


class BlobNotFoundError(BlobStoreError):
    """Raised when a reference does not resolve to stored content."""


class RejectedContentError(AssetError):
    """Raised when uploaded content is not accepted by the blob store."""

    def __init__(self, message: str, content_type: str | None = None) -> None:
        super().__init__(message)
        self.content_type = content_type


class ContentTooLargeError(RejectedContentError):
    """Raised when uploaded content exceeds the configured size limit."""

    def __init__(self, message: str, limit: int) -> None:
        super().__init__(message)
        self.limit = limit


class PersistenceError(AssetError):
    """Raised when the metadata store cannot complete a save or delete."""
