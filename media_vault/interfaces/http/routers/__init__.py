from fastapi import APIRouter

from media_vault.interfaces.http.routers import assets, auth


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    router.include_router(assets.router, prefix="/assets", tags=["assets"])
    return router


__all__ = [
    "create_api_router",
]
