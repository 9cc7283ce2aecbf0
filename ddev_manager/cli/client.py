"""
Backend API Client.

Thin httpx wrapper used by the dashboard commands. Every request carries
``X-Frontend-ID: cli`` so backend logs can tell terminal traffic apart from
the web dashboard. Error envelopes are turned into ``APIError``.
"""

from pathlib import Path
from typing import Any

import httpx

from ddev_manager.backend.core.config import get_server_base_url
from ddev_manager.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class APIError(Exception):
    """Raised when the backend answers with an error envelope."""

    def __init__(self, status_code: int, message: str, details: list[str] | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.details = details or []
        super().__init__(message)


class APIClient:
    """
    Async client for the DDEV Manager API.

    The base URL and timeout default to the server section of
    application.yaml. ddev start/restart can take a while, so the timeout
    there should stay above ddev.yaml's command timeout.

    Usage:
        client = APIClient()
        body = await client.call("GET", "/api/projects")
        size = await client.download("/api/projects/mysite/database/export", Path("db.sql.gz"))
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        if base_url is None:
            try:
                base_url, configured_timeout = get_server_base_url()
            except Exception as e:
                raise RuntimeError(
                    "Could not determine server URL from config/settings/application.yaml"
                ) from e
            if timeout is None:
                timeout = configured_timeout

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT_SECONDS
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": "cli"},
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request and return the raw response.

        Raises:
            httpx.HTTPError: On transport failure
        """
        client = await self._get_client()
        log_with_source(logger, "cli", "debug", "API request", method=method, path=path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(logger, "cli", "error", "API request failed", method=method, path=path, error=str(e))
            raise

        log_with_source(
            logger, "cli", "debug", "API response",
            method=method, path=path, status_code=response.status_code,
        )
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def call(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """
        Send a request and return the decoded success envelope.

        Raises:
            APIError: If the backend answers with ``success: false`` or a non-2xx status
        """
        return self.unwrap(await self.request(method, path, **kwargs))

    async def download(self, path: str, destination: Path, chunk_size: int = 64 * 1024) -> int:
        """
        Stream a GET response body into ``destination``.

        The file is only created once the backend has answered 2xx.

        Returns:
            Number of bytes written

        Raises:
            APIError: If the backend answers with an error envelope
        """
        client = await self._get_client()
        log_with_source(logger, "cli", "debug", "API download", path=path, destination=str(destination))

        async with client.stream("GET", path) as response:
            if response.is_error:
                await response.aread()
                self.unwrap(response)

            written = 0
            with destination.open("wb") as out:
                async for chunk in response.aiter_bytes(chunk_size):
                    out.write(chunk)
                    written += len(chunk)
        return written

    @staticmethod
    def unwrap(response: httpx.Response) -> dict[str, Any]:
        """
        Decode an envelope, raising APIError for error responses.

        Raises:
            APIError: If the backend answers with ``success: false`` or a non-2xx status
        """
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if response.is_error or body.get("success") is False:
            error = body.get("error") or {}
            raise APIError(
                response.status_code,
                body.get("message") or error.get("message") or response.reason_phrase,
                error.get("details") or body.get("details"),
            )
        return body


_client: APIClient | None = None


def get_api_client() -> APIClient:
    """Shared client for the current command."""
    global _client
    if _client is None:
        _client = APIClient()
    return _client
