"""Protocols defining the gateway session seen by domain operations.

Domain services depend on these interfaces rather than the concrete client
so they can be exercised with fakes.
"""

from typing import Any, Protocol, runtime_checkable

from ibcp.infrastructure.gateway.endpoints import Endpoint


@runtime_checkable
class GatewaySession(Protocol):
    """An authenticated session able to invoke gateway endpoints."""

    async def request(
        self,
        endpoint: Endpoint,
        data: dict | list | None = None,
        params: dict | None = None,
        path_params: dict | None = None,
    ) -> Any:
        """Invoke an endpoint on an authenticated session."""
        ...


@runtime_checkable
class BrokerConnectionManager(Protocol):
    """Protocol for session lifecycle management."""

    async def connect(self) -> Any:
        """Establish an authenticated session."""
        ...

    async def logout(self) -> None:
        """End the gateway session."""
        ...

    async def disconnect(self) -> None:
        """Release local resources."""
        ...

    def is_connected(self) -> bool:
        """Check if the session is connected and authenticated."""
        ...
