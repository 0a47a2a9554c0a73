"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. verify_recaptcha is the hook that puts captcha
verification into a route's validation pipeline:

    @router.post("/contact", dependencies=[Depends(verify_recaptcha)])
"""

from __future__ import annotations

from fastapi import Depends, Request

from config import AppSettings
from errors import CaptchaValidationError
from infrastructure.captcha.protocol import CaptchaVerifier
from infrastructure.captcha.widget import RecaptchaWidget
from shared.ip_utils import get_remote_addr

CHALLENGE_FIELD = "recaptcha_challenge_field"
RESPONSE_FIELD = "recaptcha_response_field"

INVALID_CAPTCHA_MESSAGE = "This value is not a valid captcha."


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_captcha_verifier(request: Request) -> CaptchaVerifier:
    """Return the captcha verifier built at startup."""
    return request.app.state.captcha_verifier


def get_recaptcha_widget(settings: AppSettings = Depends(get_settings)) -> RecaptchaWidget:
    return RecaptchaWidget(settings.recaptcha, settings.parameters())


async def verify_recaptcha(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    verifier: CaptchaVerifier = Depends(get_captcha_verifier),
) -> None:
    """Reject the request with a 400 unless its captcha answer checks out."""
    form = await request.form()
    challenge = form.get(CHALLENGE_FIELD) or ""
    response = form.get(RESPONSE_FIELD) or ""
    remote_ip = get_remote_addr(request, settings.trust_proxy_headers)

    if not await verifier.validate(remote_ip, str(challenge), str(response)):
        raise CaptchaValidationError(INVALID_CAPTCHA_MESSAGE, field=RESPONSE_FIELD)
