"""
GitHub API client for making authenticated requests.
Host, User-Agent and timeouts are injected so calls can be redirected.
"""

import logging
from typing import Optional, Dict, Any

import httpx

from gitdata_commit.common.config.config import (
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    GITHUB_CONNECT_TIMEOUT,
    GITHUB_REQUEST_TIMEOUT,
    GITHUB_USER_AGENT,
)
from gitdata_commit.common.exception.exceptions import ConnectivityError

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """Raised when a GitHub API call fails or returns an unusable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubAPIClient:
    """Base client for GitHub API interactions with static token authentication."""

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_URL,
        user_agent: str = GITHUB_USER_AGENT,
        api_version: str = GITHUB_API_VERSION,
        timeout: float = GITHUB_REQUEST_TIMEOUT,
        connect_timeout: float = GITHUB_CONNECT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize GitHub API client.

        Args:
            token: GitHub token sent as ``Authorization: token <token>``
            base_url: API root URL
            user_agent: Value of the User-Agent header sent on every call
            api_version: Value of the X-GitHub-Api-Version header
            timeout: Request timeout in seconds
            connect_timeout: Connection timeout in seconds
            transport: Optional httpx transport (used to route calls to a fake server)
        """
        self._token = token
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.api_version = api_version
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for GitHub API requests.

        Returns:
            Headers dictionary
        """
        return {
            "Authorization": f"token {self._token}",
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.api_version,
        }

    def _new_client(self) -> httpx.AsyncClient:
        timeout_config = httpx.Timeout(self.timeout, connect=self.connect_timeout)
        return httpx.AsyncClient(
            timeout=timeout_config, trust_env=False, transport=self._transport
        )

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make a GitHub API request.

        Args:
            method: HTTP method (GET, POST, PATCH)
            path: API path (without base URL)
            data: Request body data, serialized as JSON

        Returns:
            Decoded JSON object, or an empty dict for an empty body

        Raises:
            GitHubAPIError: On transport failure, non-2xx status or a body
                that is not a JSON object
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = self._get_headers()

        try:
            response = await self._execute_http_request(method, url, headers, data)
        except httpx.RequestError as e:
            error_msg = f"GitHub API request error: {e}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg) from e

        return self._process_response(response, method, url)

    async def _execute_http_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        data: Optional[Dict[str, Any]],
    ) -> httpx.Response:
        """Execute HTTP request with method routing.

        Raises:
            ValueError: If HTTP method is unsupported
        """
        method_upper = method.upper()

        async with self._new_client() as client:
            if method_upper == "GET":
                return await client.get(url, headers=headers)
            elif method_upper == "POST":
                return await client.post(url, json=data, headers=headers)
            elif method_upper == "PATCH":
                return await client.patch(url, json=data, headers=headers)
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")

    def _process_response(
        self, response: httpx.Response, method: str, url: str
    ) -> Dict[str, Any]:
        """Process HTTP response and extract data.

        Raises:
            GitHubAPIError: If response status indicates failure or the body
                is not a JSON object
        """
        if not response.is_success:
            error_msg = f"GitHub API request failed (status {response.status_code}): {response.text}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg, status_code=response.status_code)

        logger.debug(
            f"GitHub API {method} request to {url} "
            f"successful (status: {response.status_code})"
        )
        if not response.content:
            return {}

        try:
            body = response.json()
        except ValueError as e:
            error_msg = f"GitHub API {method} {url} returned a non-JSON body"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg, status_code=response.status_code) from e

        if not isinstance(body, dict):
            error_msg = f"GitHub API {method} {url} returned {type(body).__name__}, expected an object"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg, status_code=response.status_code)
        return body

    async def check_connectivity(self) -> None:
        """Check that the API root answers at all.

        Any HTTP response counts as reachable; only transport failures
        (DNS, refused connection, TLS, timeout) fail the check.

        Raises:
            ConnectivityError: If the API host cannot be reached
        """
        url = f"{self.base_url}/"
        try:
            async with self._new_client() as client:
                response = await client.get(url, headers={"User-Agent": self.user_agent})
        except httpx.RequestError as e:
            error_msg = f"GitHub API at {self.base_url} is unreachable: {e}"
            logger.error(error_msg)
            raise ConnectivityError(error_msg) from e

        logger.info(f"GitHub API at {self.base_url} reachable (status: {response.status_code})")
