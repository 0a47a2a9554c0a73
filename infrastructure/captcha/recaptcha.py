"""reCAPTCHA (legacy challenge/response API) implementation of CaptchaVerifier.

The verify endpoint answers in plain text: the first line is ``true`` or
``false``, the second line a reason code such as ``incorrect-captcha-sol``.

A rejected answer is ``False``. A server that cannot be reached raises
TransportError and a missing remote IP raises ConfigurationError; neither is
ever reported as ``False``.
"""

from __future__ import annotations

from typing import Mapping, Optional

from config import RecaptchaSettings
from errors import ConfigurationError
from infrastructure.http_client import HttpClient
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)


def parse_answer(body: str) -> bool:
    """True iff the first line of the server answer is exactly ``true`` once trimmed."""
    return body.split("\n")[0].strip() == "true"


def _reason(body: str) -> Optional[str]:
    lines = body.split("\n")
    return lines[1].strip() if len(lines) > 1 else None


class RecaptchaVerifier:
    def __init__(self, settings: RecaptchaSettings, http_client: HttpClient) -> None:
        self._settings = settings
        self._http = http_client

    @property
    def enabled(self) -> bool:
        return self._settings.enabled

    async def validate(self, remote_ip: str, challenge: str, response: str) -> bool:
        if not self.enabled:
            return True
        return await self.check_answer(remote_ip, challenge, response)

    async def check_answer(
        self,
        remote_ip: Optional[str],
        challenge: Optional[str],
        response: Optional[str],
        extra_params: Optional[Mapping[str, str]] = None,
    ) -> bool:
        """Ask the verification server whether the user's answer was correct.

        Args:
            remote_ip: address of the end user who solved the challenge
            challenge: value of the recaptcha_challenge_field form field
            response: value of the recaptcha_response_field form field
            extra_params: additional fields to post to the server

        Raises:
            ConfigurationError: remote_ip is empty.
            TransportError: the verification server could not be reached.
        """
        if not remote_ip:
            raise ConfigurationError(
                "For security reasons, you must pass the remote ip to reCAPTCHA"
            )

        # discard spam submissions
        if not challenge or not response:
            log.info("recaptcha_spam_discarded", remote_ip=hash_ip(remote_ip))
            return False

        data = dict(extra_params or {})
        data.update(
            {
                "privatekey": self._settings.private_key,
                "remoteip": remote_ip,
                "challenge": challenge,
                "response": response,
            }
        )

        body = await self._http.post_form(self._settings.verify_url, data)

        if parse_answer(body):
            log.info("recaptcha_verified", remote_ip=hash_ip(remote_ip))
            return True

        log.warning(
            "recaptcha_verification_failed",
            remote_ip=hash_ip(remote_ip),
            reason=_reason(body),
        )
        return False
