"""
Remote address resolution for FastAPI requests.

The verification server is told which address solved the challenge, so the
address must not be spoofable: forwarding headers are only read when the
application is explicitly configured to sit behind a trusted reverse proxy.
"""

from __future__ import annotations

from fastapi import Request

_FORWARDING_HEADERS: tuple[str, ...] = ("X-Forwarded-For", "X-Real-IP")


def get_remote_addr(request: Request, trust_proxy_headers: bool = False) -> str:
    """Return the address of the client that sent ``request``.

    Args:
        request: The current FastAPI ``Request`` object.
        trust_proxy_headers: When True, ``X-Forwarded-For`` (first entry) and
            then ``X-Real-IP`` take precedence over the socket peer address.

    Returns:
        The resolved client IP string, or ``""`` if none can be found.
    """
    if trust_proxy_headers:
        for header in _FORWARDING_HEADERS:
            value: str | None = request.headers.get(header)
            if value:
                client_ip = value.split(",")[0].strip()
                if client_ip:
                    return client_ip

    return request.client.host if request.client else ""
