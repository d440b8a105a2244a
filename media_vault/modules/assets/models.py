"""Domain models for media assets."""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Optional

UNTITLED_FILENAME = "untitled"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(slots=True, frozen=True)
class Asset:
    id: str
    owner_id: str
    name: str
    content_type: str
    reference: str
    created_at: datetime
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(slots=True)
class UploadPayload:
    """Uploaded content together with what the client declared about it."""

    stream: BinaryIO
    filename: Optional[str] = None
    content_type: Optional[str] = None

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> "UploadPayload":
        return cls(io.BytesIO(data), filename, content_type)


# Sentinel used to differentiate between "not provided" and explicit None.
UNSET = object()
