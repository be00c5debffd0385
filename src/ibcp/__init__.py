"""Asyncio client for the Interactive Brokers Client Portal gateway."""

from .client import GatewayClient, connect
from .core.config import GatewayConfig
from .infrastructure.gateway.endpoints import Endpoint
from .infrastructure.gateway.session import SessionState
from .shared.exceptions import (
    GatewayAuthenticationError,
    GatewayClientError,
    GatewayConnectionError,
    GatewayRequestError,
    SessionDisconnectedError,
    SessionExpiredError,
)

__version__ = "0.1.0"

__all__ = [
    "Endpoint",
    "GatewayAuthenticationError",
    "GatewayClient",
    "GatewayClientError",
    "GatewayConfig",
    "GatewayConnectionError",
    "GatewayRequestError",
    "SessionDisconnectedError",
    "SessionExpiredError",
    "SessionState",
    "__version__",
    "connect",
]
