"""
HTTP Client for CLI.

Provides async HTTP client for communicating with the backend API.
All requests include X-Frontend-ID: cli header for log routing, and the
bearer token when one is configured.
"""

import os
from typing import Any

import httpx

from cloudnotes.backend.core.config import get_app_config, get_server_base_url
from cloudnotes.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

TOKEN_ENV_VAR = "CLOUDNOTES_TOKEN"


class APIError(Exception):
    """A backend call failed or returned an error envelope."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


def _get_client_config() -> tuple[str, float, str]:
    """Load base URL, timeout and API prefix from application.yaml."""
    base_url, timeout = get_server_base_url()
    return base_url, timeout, get_app_config().application.api_prefix


def unwrap(response: httpx.Response) -> Any:
    """
    Return the `data` of a response envelope.

    Raises:
        APIError: For non-2xx responses or `success: false` envelopes
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if response.is_success and isinstance(body, dict) and body.get("success", True):
        return body.get("data")

    error = (body or {}).get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        raise APIError(
            error.get("message", "API error"),
            status_code=response.status_code,
            code=error.get("code"),
        )
    raise APIError(
        response.text or f"HTTP {response.status_code}",
        status_code=response.status_code,
    )


class APIClient:
    """
    HTTP client for backend API communication.

    Features:
    - Automatic base URL and API prefix from settings
    - Bearer token from the constructor or CLOUDNOTES_TOKEN
    - X-Frontend-ID header for log routing
    - Structured logging of requests/responses

    Usage:
        client = APIClient(token="...")
        response = await client.get("/health")
        notes = unwrap(await client.get(client.api("/notes")))
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        api_prefix: str | None = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Backend base URL. If None, reads from config/settings/application.yaml.
            timeout: Request timeout in seconds. If None, reads from config/settings/application.yaml.
            token: Bearer token. If None, read from the CLOUDNOTES_TOKEN environment variable.
            api_prefix: Path prefix of the API routes. If None, reads from application.yaml.
        """
        try:
            config_base_url, config_timeout, config_prefix = _get_client_config()
        except Exception as e:
            if base_url is None:
                raise RuntimeError(
                    "Could not determine server URL from config/settings/application.yaml"
                ) from e
            config_base_url = base_url
            config_timeout = timeout if timeout is not None else 30.0
            config_prefix = "/api"

        self.base_url = (base_url or config_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config_timeout
        self.api_prefix = (api_prefix if api_prefix is not None else config_prefix).rstrip("/")
        self.token = token or os.environ.get(TOKEN_ENV_VAR) or None
        self._client: httpx.AsyncClient | None = None

    @property
    def signed_in(self) -> bool:
        return self.token is not None

    def api(self, path: str) -> str:
        """Prefix an API route path, e.g. "/notes" -> "/api/notes"."""
        return f"{self.api_prefix}{path}"

    def _headers(self) -> dict[str, str]:
        headers = {"X-Frontend-ID": "cli"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self._headers(),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request to the backend.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Request path (e.g., /health, /api/notes)
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response

        Raises:
            httpx.HTTPError: On request failure
        """
        client = await self._get_client()

        log_with_source(
            logger,
            "cli",
            "debug",
            "API request",
            method=method,
            path=path,
        )

        try:
            response = await client.request(method, path, **kwargs)

            log_with_source(
                logger,
                "cli",
                "debug",
                "API response",
                method=method,
                path=path,
                status_code=response.status_code,
            )

            return response

        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "cli",
                "error",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a PUT request."""
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a DELETE request."""
        return await self.request("DELETE", path, **kwargs)


# Module-level client instance
_client: APIClient | None = None


def configure_api_client(
    token: str | None = None,
    base_url: str | None = None,
) -> APIClient:
    """Replace the client singleton with one using the given token and server."""
    global _client
    _client = APIClient(base_url=base_url, token=token)
    return _client


def get_api_client() -> APIClient:
    """Get or create the API client singleton."""
    global _client
    if _client is None:
        _client = APIClient()
    return _client


async def close_api_client() -> None:
    """Close the API client."""
    global _client
    if _client:
        await _client.close()
        _client = None
