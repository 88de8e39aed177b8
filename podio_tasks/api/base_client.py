"""
Base API client with common functionality
"""

import asyncio
from abc import ABC
from typing import Optional, Dict, Any
import httpx
from podio_tasks.utils.logger import logger
from podio_tasks.utils.error_handler import RemoteUnavailable, error_from_status
from podio_tasks.config.constants import MAX_RETRIES, RETRY_DELAY, REQUEST_TIMEOUT

# POST/PUT are commands and are sent exactly once
RETRYABLE_METHODS = frozenset({"GET"})


class BaseAPIClient(ABC):
    """Base class for API clients with common functionality"""

    def __init__(
        self,
        base_url: str,
        timeout: float = REQUEST_TIMEOUT,
        retries: int = MAX_RETRIES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize base API client

        Args:
            base_url: Base URL for API
            timeout: Request timeout in seconds
            retries: Attempts for GET requests on transport failures
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retries = max(1, retries)
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self.logger = logger

    async def _request(
        self,
        method: str,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Any] = None,
    ) -> Any:
        """
        Make HTTP request

        Args:
            method: HTTP method (GET, POST, PUT)
            endpoint: API endpoint
            headers: Request headers
            params: Query parameters
            json_data: JSON body

        Returns:
            Decoded response body, {} for empty responses

        Raises:
            TaskAPIError: Subclass matching the failure
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        attempts = self.retries if method.upper() in RETRYABLE_METHODS else 1

        for attempt in range(attempts):
            try:
                return await self._send(method, url, headers, params, json_data, attempt, attempts)
            except RemoteUnavailable as e:
                if attempt < attempts - 1:
                    delay = RETRY_DELAY * (attempt + 1)
                    self.logger.warning(f"{e.message}, retrying in {delay} seconds...")
                    await asyncio.sleep(delay)
                else:
                    self.logger.error(f"Request failed after {attempts} attempt(s): {e.message}")
                    raise

    async def _send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]],
        params: Optional[Dict[str, Any]],
        json_data: Optional[Any],
        attempt: int,
        attempts: int,
    ) -> Any:
        self.logger.debug(f"Request: {method} {url} (attempt {attempt + 1}/{attempts})")

        request_kwargs = {
            "method": method,
            "url": url,
            "headers": headers,
            "params": params,
        }

        if json_data is not None:
            request_kwargs["json"] = json_data
            self.logger.debug(f"Request JSON data: {json_data}")

        try:
            response = await self.client.request(**request_kwargs)
        except httpx.TimeoutException as e:
            raise RemoteUnavailable(f"Request timed out: {method} {url}") from e
        except httpx.RequestError as e:
            raise RemoteUnavailable(f"Request error: {e}") from e

        self.logger.debug(f"Response status: {response.status_code}")

        if response.status_code >= 400:
            error_body = self._decode(response)
            self.logger.warning(f"Error response body: {response.text[:1000]}")
            raise error_from_status(response.status_code, error_body)

        # Handle empty response (204 No Content or empty body)
        if response.status_code == 204 or not response.text.strip():
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise RemoteUnavailable(f"Malformed response body from {method} {url}") from e

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text[:1000] or None

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
