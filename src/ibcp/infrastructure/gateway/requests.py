"""GatewayRequestClient - HTTP requests against the Client Portal gateway"""

from typing import Any

import httpx
from loguru import logger

from ibcp.core.config import DEFAULT_BASE_URL
from ibcp.core.logging import install_logging_bridge
from ibcp.shared.exceptions import GatewayRequestError

from .endpoints import Endpoint


class GatewayRequestClient:
    """Low-level HTTP request client

    Responsibilities:
    - Endpoint path resolution
    - HTTP request execution with a per-call timeout
    - JSON encode/decode
    - Mapping network and non-2xx failures to GatewayRequestError

    No retries: every failure surfaces to the caller.
    """

    USER_AGENT = "ibcp/0.1"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        verify_ssl: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize request client

        Args:
            base_url: Gateway root, e.g. https://localhost:5000
            timeout: Per-request timeout in seconds
            verify_ssl: Verify the gateway's TLS certificate
            transport: Optional httpx transport (for testing)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None
        install_logging_bridge()

    @property
    def base_url(self) -> str:
        return self._base_url

    def _build_http_client(self) -> httpx.AsyncClient:
        """Create an AsyncClient with httpx request/response logging hooks."""
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            verify=self._verify_ssl,
            transport=self._transport,
            headers={"User-Agent": self.USER_AGENT, "Accept": "application/json"},
            event_hooks={
                "request": [self._log_httpx_request],
                "response": [self._log_httpx_response],
            },
        )

    async def _log_httpx_request(self, request: httpx.Request) -> None:
        """Log outbound httpx requests."""
        logger.debug(f"HTTPX request: {request.method} {request.url}")

    async def _log_httpx_response(self, response: httpx.Response) -> None:
        """Log httpx responses including status and body."""
        await response.aread()
        logger.debug(
            f"HTTPX response: status={response.status_code} url={response.url} body={response.text}"
        )

    def set_http_client(self, client: httpx.AsyncClient) -> None:
        """Set the HTTP client (for testing or external management)"""
        self._http_client = client

    async def aclose(self) -> None:
        """Close the underlying HTTP client"""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def request(
        self,
        endpoint: Endpoint,
        data: dict | list | None = None,
        params: dict | None = None,
        path_params: dict | None = None,
    ) -> Any:
        """Invoke a gateway endpoint

        Args:
            endpoint: Operation to invoke
            data: JSON payload for POST requests
            params: Query parameters
            path_params: Values for the endpoint's path template

        Returns:
            Decoded JSON body, or {} for an empty body

        Raises:
            GatewayRequestError: On network failure, timeout or non-2xx status
        """
        if self._http_client is None:
            self._http_client = self._build_http_client()

        path = endpoint.format_path(path_params)
        method = endpoint.method
        logger.debug(f"{endpoint.name}: {method} {path}")

        try:
            if method == "GET":
                response = await self._http_client.get(path, params=params)
            elif method == "POST":
                response = await self._http_client.post(
                    path, json=data, params=params
                )
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")
        except httpx.TimeoutException as e:
            logger.error(f"{endpoint.name}: request timed out: {e}")
            raise GatewayRequestError(
                f"{endpoint.name} timed out after {self._timeout}s"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"{endpoint.name}: network error: {e}")
            raise GatewayRequestError(f"{endpoint.name} failed: {e}") from e

        if not response.is_success:
            message = self._format_error(response)
            logger.error(f"{endpoint.name}: {message}")
            raise GatewayRequestError(message, status_code=response.status_code)

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise GatewayRequestError(
                f"{endpoint.name} returned a non-JSON body: {response.text[:200]}",
                status_code=response.status_code,
            ) from e

    def _format_error(self, response: httpx.Response) -> str:
        """Return a safe string describing an HTTP error without assuming keys."""
        body: str
        try:
            parsed = response.json()
            body = str(parsed)
        except ValueError:
            body = response.text
        return f"Request failed: {response.status_code} - {body}"
