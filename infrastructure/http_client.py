"""Shared async HTTP client with configurable timeout and optional proxy."""

from __future__ import annotations

import base64
from typing import Any, Mapping, Optional

import httpx

from config import HttpProxySettings, RecaptchaSettings
from errors import TransportError
from shared.logging import get_logger

log = get_logger(__name__)


def build_proxy(proxy: Optional[HttpProxySettings]) -> Optional[httpx.Proxy]:
    """Translate proxy settings into an httpx.Proxy, or None for a direct connection."""
    if proxy is None or not proxy.is_active:
        return None

    if not proxy.auth:
        return httpx.Proxy(proxy.url)

    if proxy.url.startswith("socks"):
        username, _, password = proxy.auth.partition(":")
        return httpx.Proxy(proxy.url, auth=(username, password))

    credential = base64.b64encode(proxy.auth.encode()).decode("ascii")
    return httpx.Proxy(
        proxy.url, headers={"Proxy-Authorization": f"Basic {credential}"}
    )


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient.

    One instance per external service keeps timeouts and proxy routing
    independently configurable. Environment proxy variables are ignored:
    the only proxy used is the one passed in.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        *,
        proxy: Optional[httpx.Proxy] = None,
        verify: bool = True,
        follow_redirects: bool = False,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.proxy = proxy
        self._client = httpx.AsyncClient(
            timeout=timeout,
            proxy=proxy,
            verify=verify,
            follow_redirects=follow_redirects,
            headers=headers,
            transport=transport,
            trust_env=False,
        )

    @classmethod
    def from_settings(
        cls,
        settings: RecaptchaSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "HttpClient":
        if not settings.verify_tls:
            log.warning("tls_verification_disabled", host=settings.verify_server)
        return cls(
            timeout=settings.timeout_seconds,
            proxy=build_proxy(settings.http_proxy),
            verify=settings.verify_tls,
            follow_redirects=settings.follow_redirects,
            headers={"User-Agent": settings.user_agent},
            transport=transport,
        )

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._client.post(url, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._client.get(url, **kwargs)

    async def post_form(self, url: str, data: Mapping[str, str]) -> str:
        """POST url-encoded form data and return the response body.

        Raises:
            TransportError: the server could not be reached, redirected in a
                loop, sent an undecodable or empty body, or answered with a
                non-2xx status.
        """
        try:
            response = await self._client.post(url, data=dict(data))
        except httpx.RequestError as e:
            log.error(
                "http_post_failed",
                url=url,
                proxied=self.proxy is not None,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransportError("Could not open socket") from e

        if not response.is_success:
            log.error(
                "http_post_bad_status",
                url=url,
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            raise TransportError(
                "Could not open socket", details={"status_code": response.status_code}
            )

        if not response.text:
            log.error("http_post_empty_body", url=url)
            raise TransportError("Could not open socket")

        return response.text

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
