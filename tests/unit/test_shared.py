"""
Unit tests for the shared/ utility modules.

Covers:
- shared.ip_utils  (get_remote_addr)
- shared.logging   (hash_ip, redact_sensitive_fields)
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from shared import logging as shared_logging
from shared.ip_utils import get_remote_addr
from shared.logging import hash_ip, redact_sensitive_fields


def _make_request(headers: dict, client_host: str | None = "10.0.0.1") -> MagicMock:
    """Minimal mock of a FastAPI Request."""
    req = MagicMock()
    req.headers = headers
    if client_host is None:
        req.client = None
    else:
        req.client = MagicMock()
        req.client.host = client_host
    return req


# ---------------------------------------------------------------------------
# shared.ip_utils: get_remote_addr
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "headers, trust, expected_ip",
    [
        ({}, False, "10.0.0.1"),
        ({"X-Forwarded-For": "1.2.3.4"}, False, "10.0.0.1"),
        ({"X-Forwarded-For": "1.2.3.4, 5.6.7.8"}, True, "1.2.3.4"),
        ({"X-Real-IP": "9.9.9.9"}, True, "9.9.9.9"),
        ({"X-Forwarded-For": " , ", "X-Real-IP": "9.9.9.9"}, True, "9.9.9.9"),
        ({}, True, "10.0.0.1"),
    ],
    ids=[
        "socket_peer",
        "untrusted_header_ignored",
        "forwarded_first_entry",
        "real_ip",
        "blank_forwarded_falls_through",
        "trusted_without_headers",
    ],
)
def test_get_remote_addr(headers, trust, expected_ip):
    assert get_remote_addr(_make_request(headers), trust) == expected_ip


def test_get_remote_addr_without_client():
    assert get_remote_addr(_make_request({}, client_host=None)) == ""


# ---------------------------------------------------------------------------
# shared.logging
# ---------------------------------------------------------------------------


class TestHashIp:
    def test_passthrough_in_development(self, monkeypatch):
        monkeypatch.setitem(shared_logging._state, "production", False)
        assert hash_ip("1.2.3.4") == "1.2.3.4"

    def test_hashed_in_production(self, monkeypatch):
        monkeypatch.setitem(shared_logging._state, "production", True)
        hashed = hash_ip("1.2.3.4")
        assert hashed != "1.2.3.4"
        assert len(hashed) == 16

    def test_none(self):
        assert hash_ip(None) is None


class TestRedaction:
    @pytest.mark.parametrize(
        "field",
        ["private_key", "privatekey", "auth", "proxy_auth", "Proxy-Authorization"],
    )
    def test_sensitive_fields_redacted(self, field):
        event = redact_sensitive_fields(None, "info", {"event": "x", field: "secret"})
        assert event[field] == "***REDACTED***"

    def test_other_fields_kept(self):
        event = redact_sensitive_fields(
            None, "info", {"event": "recaptcha_verified", "remote_ip": "1.2.3.4"}
        )
        assert event == {"event": "recaptcha_verified", "remote_ip": "1.2.3.4"}
