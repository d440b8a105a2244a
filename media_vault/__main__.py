"""Run the HTTP service with uvicorn: ``python -m media_vault``."""

import uvicorn

from media_vault.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "media_vault.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
    )


if __name__ == "__main__":
    main()
