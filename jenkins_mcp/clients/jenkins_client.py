"""
Jenkins Client Module

Client for interacting with the Jenkins REST API.
"""

from typing import Any, Dict, Mapping, NamedTuple, Optional

import httpx
from loguru import logger

from jenkins_mcp.core.config import ClientConfig
from jenkins_mcp.core.constants import (
    ERROR_AUTH_FAILED,
    HEADER_LOCATION,
    HTTP_CREATED,
    HTTP_FORBIDDEN,
    HTTP_FOUND,
    HTTP_NOT_FOUND,
    HTTP_UNAUTHORIZED,
)
from jenkins_mcp.core.exceptions import (
    AuthenticationError,
    JenkinsAPIError,
    JenkinsClientError,
    NetworkError,
    RequestTimeoutError,
    ResourceNotFoundError,
)
from jenkins_mcp.observability.tracing import get_tracer
from jenkins_mcp.utils import build_query_string
from .http_manager import HTTPManager
from .retry_manager import RetryConfig, RetryManager, is_timeout

tracer = get_tracer(__name__)

QueryParams = Optional[Mapping[str, Any]]


class PostResult(NamedTuple):
    """Parsed POST body (or None) and the Location header (or None)."""
    data: Any
    location: Optional[str]


class HeadResult(NamedTuple):
    """Raw status and headers of a HEAD request."""
    status_code: int
    headers: httpx.Headers


class TextWithHeaders(NamedTuple):
    """Raw response text together with the response headers."""
    text: str
    headers: httpx.Headers


class JenkinsClient:
    """
    Client for Jenkins API operations.

    Handles authentication, retries with backoff, and translation of
    failed exchanges into the JenkinsClientError hierarchy.

    Example:
        >>> client = JenkinsClient(ClientConfig(
        ...     base_url="https://jenkins.example.com",
        ...     user="admin",
        ...     api_token="token"
        ... ))
        >>> job = await client.get_json("/job/myJob/api/json", {"tree": "name,color"})
    """

    def __init__(
        self,
        config: ClientConfig,
        http_manager: Optional[HTTPManager] = None,
        retry_manager: Optional[RetryManager] = None
    ):
        """
        Initialize Jenkins client.

        Args:
            config: Immutable client settings
            http_manager: Transport (None = real network)
            retry_manager: Retry policy (None = derived from config)
        """
        self.config = config
        self._auth = httpx.BasicAuth(config.user, config.api_token)
        self._http = http_manager or HTTPManager()
        self._retry = retry_manager or RetryManager(
            RetryConfig(
                max_retries=config.max_retries,
                initial_backoff=config.retry_delay
            )
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def build_url(self, path: str, params: QueryParams = None) -> str:
        """Join base URL, path and query string."""
        return f"{self.config.base_url}{path}{build_query_string(params)}"

    async def get_json(self, path: str, params: QueryParams = None) -> Any:
        """
        Perform a GET request and parse the JSON body.

        Args:
            path: Path relative to the Jenkins base URL
            params: Query parameters (None values are dropped)

        Returns:
            Parsed JSON value

        Raises:
            JenkinsClientError: Classified failure

        Example:
            >>> data = await client.get_json("/api/json", {"tree": "jobs[name]"})
        """
        url = self.build_url(path, params)
        response = await self._request("GET", url)
        self._raise_for_status(response, url)

        try:
            return response.json()
        except ValueError as e:
            raise JenkinsAPIError(
                f"Invalid JSON response from {url}",
                status_code=response.status_code,
                response_body=response.text[:500]
            ) from e

    async def get_text(self, path: str, params: QueryParams = None) -> str:
        """
        Perform a GET request that returns raw text (e.g., console logs).
        """
        url = self.build_url(path, params)
        response = await self._request("GET", url)
        self._raise_for_status(response, url)
        return response.text

    async def get_text_with_headers(self, path: str, params: QueryParams = None) -> TextWithHeaders:
        """
        Perform a GET request returning raw text and response headers.

        Used for progressive logs, where continuation is signalled in headers.
        """
        url = self.build_url(path, params)
        response = await self._request("GET", url)
        self._raise_for_status(response, url)
        return TextWithHeaders(text=response.text, headers=response.headers)

    async def post(
        self,
        path: str,
        data: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
        params: QueryParams = None
    ) -> PostResult:
        """
        Perform a POST request.

        Redirects are not followed: Jenkins answers build triggers with 201
        or 302 and reports the created queue item in the Location header.

        Args:
            path: Path relative to the Jenkins base URL
            data: Form fields, sent as application/x-www-form-urlencoded
            json: JSON body, sent as application/json
            params: Query parameters

        Returns:
            PostResult with parsed body (None when empty or not JSON) and Location

        Raises:
            JenkinsClientError: For any non-2xx status other than 201/302

        Example:
            >>> result = await client.post("/job/myJob/build")
            >>> result.location
            'https://jenkins.example.com/queue/item/42/'
        """
        url = self.build_url(path, params)
        kwargs: Dict[str, Any] = {}
        if data is not None:
            kwargs["data"] = data
        elif json is not None:
            kwargs["json"] = json

        response = await self._request("POST", url, follow_redirects=False, **kwargs)
        location = response.headers.get(HEADER_LOCATION)

        if response.status_code in (HTTP_CREATED, HTTP_FOUND):
            return PostResult(data=None, location=location)

        self._raise_for_status(response, url)

        if not response.content:
            return PostResult(data=None, location=location)

        try:
            return PostResult(data=response.json(), location=location)
        except ValueError:
            return PostResult(data=None, location=location)

    async def head(self, path: str) -> HeadResult:
        """
        Perform a HEAD request; useful for checking resource existence.

        The status is returned as-is, without error translation.
        """
        url = self.build_url(path)
        response = await self._request("HEAD", url)
        return HeadResult(status_code=response.status_code, headers=response.headers)

    async def _request(
        self,
        method: str,
        url: str,
        follow_redirects: bool = True,
        **kwargs: Any
    ) -> httpx.Response:
        """Run one retried exchange and return the final response."""
        description = f"{method} {url}"

        with tracer.start_as_current_span("jenkins.request") as span:
            span.set_attribute("http.method", method)
            span.set_attribute("http.url", url)

            logger.debug(description)

            async with self._http.get_client(
                verify_ssl=self.config.verify_ssl,
                timeout=self.config.timeout,
                follow_redirects=follow_redirects,
                auth=self._auth
            ) as client:
                result = await self._retry.execute(
                    lambda: self._http.send(client, method, url, self.config.timeout, **kwargs),
                    description=description
                )

            span.set_attribute("jenkins.attempts", result.attempts)

            if result.error is not None:
                raise self._classify_error(result.error, url) from result.error

            span.set_attribute("http.status_code", result.response.status_code)
            return result.response

    def _classify_error(self, error: BaseException, url: str) -> JenkinsClientError:
        """Map a transport-level failure onto the error taxonomy."""
        if is_timeout(error):
            return RequestTimeoutError(
                f"Request to {url} timed out after {self.config.timeout}s",
                timeout_seconds=self.config.timeout
            )

        return NetworkError(
            f"Network error for {url}: {str(error) or type(error).__name__}",
            details={"error": type(error).__name__}
        )

    def _raise_for_status(self, response: httpx.Response, url: str) -> None:
        """
        Raise the matching JenkinsClientError for a non-2xx response.

        Raises:
            AuthenticationError: 401 or 403
            ResourceNotFoundError: 404
            JenkinsAPIError: Any other non-2xx status
        """
        if response.is_success:
            return

        status = response.status_code
        body = response.text

        if status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
            raise AuthenticationError(
                f"Authentication failed ({status}). {ERROR_AUTH_FAILED}",
                status_code=status,
                response_body=body
            )

        if status == HTTP_NOT_FOUND:
            raise ResourceNotFoundError(
                f"Resource not found: {url}",
                status_code=status,
                response_body=body
            )

        raise JenkinsAPIError(
            f"Jenkins API error ({status}): {body or response.reason_phrase}",
            status_code=status,
            response_body=body
        )
