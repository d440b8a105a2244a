"""Feature modules and their public exports."""

from . import accounts, assets

__all__ = [
    "accounts",
    "assets",
]
