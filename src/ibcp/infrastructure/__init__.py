"""Infrastructure module."""

from .protocols import BrokerConnectionManager, GatewaySession

__all__ = ["BrokerConnectionManager", "GatewaySession"]
