"""
Podio API client
"""

from typing import Optional, Dict, Any
import httpx
from podio_tasks.api.base_client import BaseAPIClient
from podio_tasks.config.settings import settings
from podio_tasks.config.constants import PODIO_AUTH_SCHEME, MAX_RETRIES
from podio_tasks.models.context import UserContext
from podio_tasks.utils.error_handler import Unauthorized


class PodioClient(BaseAPIClient):
    """
    Transport for the Podio REST API

    Holds no per-user state: credentials come from the UserContext passed
    with each request, so one client can be shared by concurrent callers.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retries: int = MAX_RETRIES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Podio client

        Args:
            base_url: API base URL, defaults to settings.PODIO_API_BASE_URL
            timeout: Request timeout, defaults to settings.REQUEST_TIMEOUT
            retries: Attempts for GET requests on transport failures
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(
            base_url or settings.PODIO_API_BASE_URL,
            timeout=timeout if timeout is not None else settings.REQUEST_TIMEOUT,
            retries=retries,
            transport=transport,
        )

    def _get_headers(self, context: UserContext) -> Dict[str, str]:
        """Get request headers with authentication"""
        if not context.access_token:
            raise Unauthorized("No access token in user context")
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"{PODIO_AUTH_SCHEME} {context.access_token}",
        }

    async def request(
        self,
        method: str,
        path: str,
        context: UserContext,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Any] = None,
    ) -> Any:
        """
        Perform an authenticated request

        Args:
            method: GET, POST or PUT
            path: Logical path, e.g. "/task/42"
            context: Identity to authenticate as
            params: Query parameters
            json_data: Structured request body

        Returns:
            Decoded response body
        """
        return await self._request(
            method.upper(),
            path,
            headers=self._get_headers(context),
            params=params,
            json_data=json_data,
        )
