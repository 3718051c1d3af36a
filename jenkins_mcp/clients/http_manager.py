"""
HTTP Manager Module

Creates short-lived HTTP clients and performs single, time-bounded requests.
"""

import asyncio
from typing import Any, Optional

import httpx
from loguru import logger

from jenkins_mcp.core.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    MAX_KEEPALIVE_CONNECTIONS,
    MAX_CONNECTIONS,
)


class HTTPManager:
    """
    HTTP client factory and single-request transport.

    Features:
    - Configurable timeouts
    - SSL verification control
    - Optional redirect following
    - Injectable transport (e.g. httpx.MockTransport in tests)

    A client is meant to live for one logical operation only:

    Example:
        >>> http_manager = HTTPManager()
        >>> async with http_manager.get_client(timeout=10.0) as client:
        ...     response = await http_manager.send(client, "GET", url, timeout=10.0)
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize HTTP manager.

        Args:
            transport: Transport handed to every client (None = real network)
        """
        self._transport = transport
        self._limits = httpx.Limits(
            max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
            max_connections=MAX_CONNECTIONS
        )

    def get_client(
        self,
        verify_ssl: bool = True,
        timeout: Optional[float] = None,
        follow_redirects: bool = True,
        auth: Optional[httpx.Auth] = None
    ) -> httpx.AsyncClient:
        """
        Get configured HTTP client.

        Args:
            verify_ssl: Whether to verify SSL certificates
            timeout: Request timeout in seconds (None = use default)
            follow_redirects: Whether to follow redirects
            auth: Authentication applied to every request

        Returns:
            Configured AsyncClient, to be used as an async context manager
        """
        timeout_config = httpx.Timeout(
            timeout=timeout if timeout is not None else DEFAULT_REQUEST_TIMEOUT,
            connect=min(DEFAULT_CONNECT_TIMEOUT, timeout or DEFAULT_CONNECT_TIMEOUT)
        )

        return httpx.AsyncClient(
            verify=verify_ssl,
            follow_redirects=follow_redirects,
            timeout=timeout_config,
            limits=self._limits,
            auth=auth,
            transport=self._transport,
            http2=self._transport is None
        )

    async def send(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        timeout: float,
        **kwargs: Any
    ) -> httpx.Response:
        """
        Issue exactly one request and read its body.

        The whole exchange runs under ``timeout``; when the deadline
        passes the in-flight request is cancelled and
        ``asyncio.TimeoutError`` is raised.

        Args:
            client: Client from get_client()
            method: HTTP method
            url: Absolute URL
            timeout: Deadline for the full exchange, in seconds
            **kwargs: Passed through to httpx (data, json, headers, ...)

        Returns:
            Response with its body already read

        Raises:
            httpx.TransportError: Connection-level failure
            asyncio.TimeoutError: Deadline exceeded
        """
        logger.trace(f"{method} {url}")
        return await asyncio.wait_for(client.request(method, url, **kwargs), timeout=timeout)
