"""
Health check endpoint.

GET /health: reports how captcha verification is configured. The
verification server is never contacted from here.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from config import AppSettings
from dependencies import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: AppSettings = Depends(get_settings)) -> dict:
    recaptcha = settings.recaptcha
    checks: dict[str, str] = {
        "recaptcha": "enabled" if recaptcha.enabled else "disabled",
        "proxy": "configured" if recaptcha.http_proxy.is_active else "direct",
    }
    return {"status": "healthy", "checks": checks}
