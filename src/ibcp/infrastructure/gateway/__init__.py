"""Client Portal gateway infrastructure

Endpoint - Closed set of gateway operations
GatewayRequestClient - HTTP requests against the gateway
SessionState / SessionStateStore - Session status snapshots
Heartbeat - Background keepalive
GatewayConnectionManager - Session lifecycle
"""

from .connection import GatewayConnectionManager
from .endpoints import Endpoint
from .heartbeat import Heartbeat, HeartbeatStatus
from .requests import GatewayRequestClient
from .session import SessionState, SessionStateStore, SSOValidation

__all__ = [
    "Endpoint",
    "GatewayConnectionManager",
    "GatewayRequestClient",
    "Heartbeat",
    "HeartbeatStatus",
    "SSOValidation",
    "SessionState",
    "SessionStateStore",
]
