"""Client-side widget parameters for the legacy reCAPTCHA API."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from config import RecaptchaSettings

API_SERVER = "http://www.google.com/recaptcha/api"
API_SECURE_SERVER = "https://www.google.com/recaptcha/api"

DEFAULT_LOCALE = "en"


class RecaptchaWidget:
    """Builds the URLs and template context a page needs to render the widget.

    ``parameters`` is the host's flat parameter store; the widget locale is
    read from it under the configured ``locale_key``.
    """

    def __init__(
        self,
        settings: RecaptchaSettings,
        parameters: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._settings = settings
        self._parameters = parameters or {}

    @property
    def server(self) -> str:
        return API_SECURE_SERVER if self._settings.secure else API_SERVER

    @property
    def challenge_url(self) -> str:
        return f"{self.server}/challenge?k={self._settings.public_key}"

    @property
    def noscript_url(self) -> str:
        return f"{self.server}/noscript?k={self._settings.public_key}"

    @property
    def locale(self) -> str:
        return self._parameters.get(self._settings.locale_key) or DEFAULT_LOCALE

    def context(self) -> dict[str, Any]:
        return {
            "public_key": self._settings.public_key,
            "url_challenge": self.challenge_url,
            "url_noscript": self.noscript_url,
            "enabled": self._settings.enabled,
            "lang": self.locale,
        }
