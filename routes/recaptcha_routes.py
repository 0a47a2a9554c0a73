"""
Widget endpoint.

GET /recaptcha/widget: the parameters a front end needs to render the
challenge (public key, script and noscript URLs, language).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_recaptcha_widget
from infrastructure.captcha.widget import RecaptchaWidget

router = APIRouter(prefix="/recaptcha", tags=["recaptcha"])


@router.get("/widget")
async def widget(widget: RecaptchaWidget = Depends(get_recaptcha_widget)) -> dict:
    return widget.context()
