"""Repository protocol for asset metadata persistence."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import Asset


class AssetRepository(Protocol):
    """Metadata store consumed by the asset service.

    Listing methods return assets newest first. ``save`` inserts unknown ids
    and otherwise updates the editable fields only. ``delete`` removes the
    record without checking that it still exists.
    """

    async def get_by_id(self, asset_id: str) -> Asset | None:
        ...

    async def get_by_id_and_owner(self, asset_id: str, owner_id: str) -> Asset | None:
        ...

    async def list_by_owner(self, owner_id: str) -> Sequence[Asset]:
        ...

    async def list_by_fragment(self, fragment: str) -> Sequence[Asset]:
        ...

    async def list_by_owner_and_fragment(self, owner_id: str, fragment: str) -> Sequence[Asset]:
        ...

    async def list_all(self) -> Sequence[Asset]:
        ...

    async def save(self, asset: Asset) -> Asset:
        ...

    async def delete(self, asset: Asset) -> None:
        ...
