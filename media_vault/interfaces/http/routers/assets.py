"""Asset upload, search, download and removal endpoints."""

import logging
import os
from typing import BinaryIO, Iterator, NoReturn, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile, status
from fastapi.responses import StreamingResponse

from media_vault.core.security import get_current_account
from media_vault.interfaces.http.deps import get_asset_service
from media_vault.modules.accounts import Account
from media_vault.modules.assets import (
    Asset,
    AssetError,
    AssetService,
    BlobNotFoundError,
    ContentTooLargeError,
    RejectedContentError,
    UploadPayload,
    normalize_content_type,
)
from media_vault.schemas import AssetListResponse, AssetResponse, AssetUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

STREAM_CHUNK_SIZE = 64 * 1024
MAX_NAME_LENGTH = 255
MAX_TITLE_LENGTH = 255
MAX_CONTENT_TYPE_LENGTH = 100


def _to_schema(request: Request, asset: Asset) -> AssetResponse:
    content_url = request.url_for("download_asset_content", asset_id=asset.id)
    return AssetResponse(
        id=asset.id,
        owner_id=asset.owner_id,
        name=asset.name,
        content_type=asset.content_type,
        title=asset.title,
        description=asset.description,
        created_at=asset.created_at,
        content_url=str(content_url),
    )


def _sanitize_filename(filename: str | None) -> str | None:
    if not filename:
        return None
    name = os.path.basename(filename.replace("\\", "/"))
    return name.replace("\0", "").strip() or None


def _normalize_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _declared_content_type(content_type: Optional[str]) -> Optional[str]:
    if not content_type or not content_type.strip():
        return None
    media_type = normalize_content_type(content_type)
    if len(media_type) > MAX_CONTENT_TYPE_LENGTH:
        raise HTTPException(
            status_code=422,
            detail=f"Content type longer than {MAX_CONTENT_TYPE_LENGTH} characters",
        )
    return media_type


def _raise_http(exc: AssetError) -> NoReturn:
    if isinstance(exc, ContentTooLargeError):
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc)) from exc
    if isinstance(exc, RejectedContentError):
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(exc)) from exc
    logger.exception("Asset storage failure")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Asset storage is temporarily unavailable",
    ) from exc


def _iter_stream(handle: BinaryIO) -> Iterator[bytes]:
    try:
        while True:
            chunk = handle.read(STREAM_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    finally:
        handle.close()


@router.post(
    "",
    response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an asset",
)
async def upload_asset(
    request: Request,
    file: UploadFile = File(...),
    title: Optional[str] = Form(None, max_length=MAX_TITLE_LENGTH),
    description: Optional[str] = Form(None),
    account: Account = Depends(get_current_account),
    service: AssetService = Depends(get_asset_service),
) -> AssetResponse:
    filename = _sanitize_filename(file.filename)
    if filename is not None and len(filename) > MAX_NAME_LENGTH:
        raise HTTPException(
            status_code=422,
            detail=f"File name longer than {MAX_NAME_LENGTH} characters",
        )
    payload = UploadPayload(
        stream=file.file,
        filename=filename,
        content_type=_declared_content_type(file.content_type),
    )
    try:
        asset = await service.create(
            payload,
            owner_id=account.id,
            title=_normalize_optional(title),
            description=_normalize_optional(description),
        )
    except AssetError as exc:
        _raise_http(exc)
    finally:
        await file.close()
    return _to_schema(request, asset)


@router.get("", response_model=AssetListResponse, summary="List or search assets")
async def list_assets(
    request: Request,
    q: Optional[str] = None,
    mine: bool = False,
    account: Account = Depends(get_current_account),
    service: AssetService = Depends(get_asset_service),
) -> AssetListResponse:
    assets = await service.search(
        owner_id=account.id if mine else None,
        fragment=_normalize_optional(q),
    )
    return AssetListResponse(total=len(assets), assets=[_to_schema(request, asset) for asset in assets])


@router.get("/{asset_id}", response_model=AssetResponse, summary="Asset metadata")
async def get_asset(
    request: Request,
    asset_id: str,
    account: Account = Depends(get_current_account),
    service: AssetService = Depends(get_asset_service),
) -> AssetResponse:
    asset = await service.get(asset_id)
    if asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    return _to_schema(request, asset)


@router.get("/{asset_id}/content", name="download_asset_content", summary="Download asset content")
async def download_asset_content(
    asset_id: str,
    account: Account = Depends(get_current_account),
    service: AssetService = Depends(get_asset_service),
) -> StreamingResponse:
    asset = await service.get(asset_id)
    if asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    try:
        handle = await service.retrieve(asset)
    except BlobNotFoundError as exc:
        logger.error("Asset %s references missing blob %s", asset.id, asset.reference)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset content not found") from exc
    except AssetError as exc:
        _raise_http(exc)
    return StreamingResponse(
        _iter_stream(handle),
        media_type=asset.content_type,
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{quote(asset.name)}"},
    )


@router.patch("/{asset_id}", response_model=AssetResponse, summary="Edit title or description")
async def update_asset(
    request: Request,
    asset_id: str,
    payload: AssetUpdate,
    account: Account = Depends(get_current_account),
    service: AssetService = Depends(get_asset_service),
) -> AssetResponse:
    asset = await service.get(asset_id, account.id)
    if asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    changes = payload.model_dump(include=payload.model_fields_set)
    try:
        updated = await service.update_details(asset, **changes)
    except AssetError as exc:
        _raise_http(exc)
    return _to_schema(request, updated)


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an asset")
async def delete_asset(
    asset_id: str,
    account: Account = Depends(get_current_account),
    service: AssetService = Depends(get_asset_service),
) -> Response:
    asset = await service.get(asset_id, account.id)
    if asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    try:
        await service.delete(asset)
    except BlobNotFoundError as exc:
        logger.error("Asset %s references missing blob %s; record kept", asset.id, asset.reference)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Asset content is already missing") from exc
    except AssetError as exc:
        _raise_http(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
