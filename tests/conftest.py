"""
Shared test fixtures.

No test talks to the network: the verification server is an
httpx.MockTransport handler that records every request it receives.
"""

from __future__ import annotations

import os
from urllib.parse import parse_qs

import httpx
import pytest

from config import RecaptchaSettings


class FakeVerifyServer:
    """Stand-in for the reCAPTCHA verify endpoint."""

    def __init__(self, body: str = "true\nsuccess", status_code: int = 200) -> None:
        self.body = body
        self.status_code = status_code
        self.error: Exception | None = None
        self.headers: dict[str, str] = {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.headers:
            # Raw stream so the body is only decoded on the client side
            return httpx.Response(
                self.status_code,
                headers=self.headers,
                stream=httpx.ByteStream(self.body.encode()),
            )
        return httpx.Response(self.status_code, text=self.body)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def form(self, index: int = -1) -> dict[str, str]:
        parsed = parse_qs(self.requests[index].content.decode())
        return {key: values[0] for key, values in parsed.items()}

    def redirect_to_self(self) -> None:
        self.status_code = 302
        self.body = ""
        self.headers = {"Location": "http://loop.test/self"}

    def corrupt_encoding(self) -> None:
        self.headers = {"Content-Encoding": "gzip"}

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the real environment and any .env file out of every test."""
    for var in list(os.environ):
        if var.upper().startswith(("RECAPTCHA_", "SENTRY_", "LOG_")):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("ENV", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def verify_server() -> FakeVerifyServer:
    return FakeVerifyServer()


@pytest.fixture
def make_settings():
    def _make(**overrides) -> RecaptchaSettings:
        values = {"public_key": "pub-key", "private_key": "priv-key"}
        values.update(overrides)
        return RecaptchaSettings(**values)

    return _make
