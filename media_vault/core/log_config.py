"""Process-wide logging setup."""

from __future__ import annotations

import logging

from media_vault.core.config import Settings

_configured = False


def configure_logging(settings: Settings) -> None:
    """Apply level and format from settings to the root logger once per process."""
    global _configured
    level = logging.DEBUG if settings.debug else settings.logging.level.upper()
    if _configured:
        logging.getLogger().setLevel(level)
        return
    logging.basicConfig(level=level, format=settings.logging.format)
    _configured = True


__all__ = ["configure_logging"]
