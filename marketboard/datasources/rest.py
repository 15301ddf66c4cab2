"""REST API data source implementation."""

import logging
import asyncio
from typing import Any, Optional

import httpx

from marketboard.auth import AuthSession
from marketboard.config import Config
from marketboard.errors import APIError, error_for_status
from marketboard.models import Page, UserId, UserProfile, normalize_response
from .base import DataSource

logger = logging.getLogger(__name__)

# API constants
DEFAULT_API_URL = "http://localhost:8000/api"
REQUEST_TIMEOUT = 30.0
MAX_RETRIES = 2
RETRY_DELAY = 1.0


def _error_detail(response: httpx.Response) -> str:
    """Best-effort error message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return response.text


class RestDataSource(DataSource):
    """
    Data source backed by the platform's REST API.

    Behaviour:
    - Every request carries the AuthSession's bearer token, if any
    - 429 responses are retried with exponential backoff (1s, 2s, ...)
      up to ``max_retries`` times, then surface as RateLimitError
    - Other non-2xx responses surface as APIError subclasses
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        session: Optional[AuthSession] = None,
        timeout: float = REQUEST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the REST data source.

        Args:
            api_url: Base URL for the API, e.g. http://localhost:8000/api
            session: Auth context; a fresh anonymous session if None
            timeout: Per-request timeout in seconds
            max_retries: Retry budget for 429 responses
            retry_delay: First backoff delay in seconds, doubled per retry
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url
        self.session = session if session is not None else AuthSession()
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(
        cls,
        config: Config,
        session: Optional[AuthSession] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RestDataSource":
        if session is None:
            session = AuthSession(token=config.api_token)
        return cls(
            api_url=config.api_url,
            session=session,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            transport=transport,
        )

    async def _make_request(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        retry_count: int = 0,
    ) -> Any:
        """
        Make a GET request with rate-limit retries.

        Args:
            path: API path relative to the base URL
            params: Query parameters
            retry_count: Current retry attempt

        Returns:
            Response JSON data
        """
        client = await self._get_client()

        try:
            response = await client.get(
                path,
                params=params,
                headers=self.session.headers(),
            )
            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429 and retry_count < self.max_retries:
                delay = self.retry_delay * (2 ** retry_count)
                logger.warning(
                    f"Rate limited (429) on {path} (attempt {retry_count + 1}/{self.max_retries}). "
                    f"Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)
                return await self._make_request(path, params, retry_count + 1)

            if status == 429:
                logger.error(f"Rate limit exceeded on {path} after {self.max_retries} retries")
            elif status == 404:
                logger.warning(f"Endpoint not found (404): {path}")
            else:
                logger.error(f"HTTP error {status} for {path}")
            raise error_for_status(status, path, _error_detail(e.response)) from e

        except httpx.TimeoutException as e:
            logger.error(f"Request to {path} timed out after {self.timeout}s: {e}")
            raise

        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                f"GET {path} returned invalid JSON",
                response.status_code,
                path,
            ) from e

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def get_page(
        self,
        endpoint: str,
        page: int,
        page_size: int,
        params: Optional[dict[str, Any]] = None,
    ) -> Page:
        """Fetch one page and normalize its shape."""
        query = dict(params or {})
        query["page"] = page
        query["page_size"] = page_size

        data = await self._make_request(endpoint, query)
        return normalize_response(data)

    async def get_user(self, user_id: UserId) -> UserProfile:
        data = await self._make_request(f"/users/{user_id}/")
        return UserProfile.model_validate(data)

    async def get_analytics(self, period: str, cursor: Optional[str] = None) -> Any:
        params = {"cursor": cursor} if cursor else None
        return await self._make_request(f"/analytics/{period}/", params)

    async def get_user_rank(self, user_id: UserId) -> dict:
        data = await self._make_request(f"/analytics/user/{user_id}/")
        return data if isinstance(data, dict) else {}

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
