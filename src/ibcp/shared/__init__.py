"""Shared utilities and cross-cutting concerns."""

from .exceptions import (
    ConfigurationError,
    GatewayAuthenticationError,
    GatewayClientError,
    GatewayConnectionError,
    GatewayRequestError,
    HeartbeatError,
    IBCPError,
    OrderError,
    SessionDisconnectedError,
    SessionExpiredError,
)

__all__ = [
    "ConfigurationError",
    "GatewayAuthenticationError",
    "GatewayClientError",
    "GatewayConnectionError",
    "GatewayRequestError",
    "HeartbeatError",
    "IBCPError",
    "OrderError",
    "SessionDisconnectedError",
    "SessionExpiredError",
]
