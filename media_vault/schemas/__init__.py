"""Pydantic schemas used by the HTTP interface."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    account_id: str
    username: str


class AccountResponse(BaseModel):
    id: str
    username: str
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AssetResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    content_type: str
    title: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    content_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AssetListResponse(BaseModel):
    total: int
    assets: list[AssetResponse]


class AssetUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
