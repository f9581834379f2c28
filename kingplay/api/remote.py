"""
Thin async HTTP client for the spreadsheet-backed booking API.

Every call is a single attempt: no retries, no backoff. Anything other than
a decoded JSON body from a 2xx response is raised as RemoteUnavailableError,
which the DataApi turns into a mirror fallback.
"""

from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from kingplay.logging_context import get_request_logger

logger = get_request_logger(__name__)


class RemoteUnavailableError(Exception):
    """Raised when the remote API cannot serve a request.

    Covers transport failures, non-2xx statuses, and undecodable bodies.
    ``status_code`` is set only when a response was actually received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_base_url(address: str) -> str:
    """Normalize a configured address into a base URL without trailing slash.

    Examples:
        >>> build_base_url("localhost:5000/api/")
        'http://localhost:5000/api'
    """
    trimmed = address.strip().rstrip("/")
    if not trimmed:
        return ""
    if urlparse(trimmed).scheme:
        return trimmed
    return f"http://{trimmed}"


class RemoteClient:
    """
    Async JSON client bound to one base URL.

    Pass ``transport`` to route requests somewhere other than the network
    (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = build_base_url(base_url)
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @property
    def server_root(self) -> str:
        """Base URL with the trailing ``/api`` segment removed."""
        return self.base_url.removesuffix("/api")

    async def request(self, method: str, path: str, body: Optional[Any] = None) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            RemoteUnavailableError: On transport error, non-2xx status, or
                a body that is not JSON.
        """
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, json=body)
        except httpx.HTTPError as exc:
            raise RemoteUnavailableError(f"{method} {path} failed: {exc!r}") from exc

        if not response.is_success:
            raise RemoteUnavailableError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            snippet = response.text[:240].strip()
            raise RemoteUnavailableError(
                f"{method} {path} returned non-JSON body: {snippet!r}",
                status_code=response.status_code,
            ) from exc

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, body: Any) -> Any:
        return await self.request("POST", path, body)

    async def put(self, path: str, body: Any) -> Any:
        return await self.request("PUT", path, body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def ping(self) -> bool:
        """True if the server root answers with a 2xx status."""
        try:
            response = await self._client.get(f"{self.server_root}/")
        except httpx.HTTPError as exc:
            logger.debug("Health check failed: %r", exc)
            return False
        return response.is_success

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RemoteClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
