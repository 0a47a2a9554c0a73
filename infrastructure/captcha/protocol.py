"""CaptchaVerifier protocol: services depend on this, not the concrete implementation."""

from typing import Protocol


class CaptchaVerifier(Protocol):
    async def validate(self, remote_ip: str, challenge: str, response: str) -> bool: ...
