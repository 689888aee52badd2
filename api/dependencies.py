"""Shared dependencies for the API.

Routes receive the engine through ``get_engine`` so tests can swap in a
fake contacts service with ``app.dependency_overrides``.
"""
from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from enmass.auth import AuthError
from enmass.config import ConfigError, Settings, load_settings
from enmass.engine import ContactsEngine


@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return load_settings()


def get_engine() -> ContactsEngine:
    """Build an engine from the cached token; never starts a browser flow."""
    try:
        settings = get_settings()
        return ContactsEngine.from_settings(settings, interactive=False)
    except ConfigError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except AuthError as exc:
        raise HTTPException(status_code=503, detail=f"Not authorized: {exc}") from exc
