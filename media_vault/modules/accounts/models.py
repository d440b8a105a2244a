"""Domain models for contributor accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Account:
    """A contributor. ``id`` is the owner id stamped on every uploaded asset."""

    id: str
    username: str
    is_active: bool
    password_hash: str = field(repr=False)
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None


@dataclass(slots=True)
class AccountCreateInput:
    username: str
    password: str
    is_active: bool = True
