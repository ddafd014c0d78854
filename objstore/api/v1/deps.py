from __future__ import annotations

import logging

from fastapi import Header, HTTPException, Request

from objstore.app.services.bundle import ServiceBundle
from objstore.common.config import Settings

logger = logging.getLogger("http")


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_services(request: Request) -> ServiceBundle:
    return request.app.state.services


def require_api_key(
    request: Request, x_api_key: str | None = Header(default=None)
) -> None:
    settings = get_app_settings(request)
    if settings.API_KEY_ENABLED:
        api_key_expected = settings.API_KEY
        if not x_api_key or (api_key_expected and x_api_key != api_key_expected):
            preview = f"{x_api_key[:4]}***" if x_api_key else "<missing>"
            logger.warning("api_key_mismatch api_key_preview=%s", preview)
            raise HTTPException(status_code=401, detail="Invalid API key")
