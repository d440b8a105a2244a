"""SQLAlchemy-backed repository implementations."""

from .account_repository import SqlAccountRepository
from .asset_repository import SqlAssetRepository

__all__ = [
    "SqlAccountRepository",
    "SqlAssetRepository",
]
