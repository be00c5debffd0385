"""Consolidated exceptions for ibcp.

All custom exceptions are defined here to provide a single source of truth
for error handling across the package.
"""


class IBCPError(Exception):
    """Base exception for ibcp errors"""

    pass


class ConfigurationError(IBCPError):
    """Raised when configuration is invalid"""

    pass


class GatewayClientError(IBCPError):
    """Base exception for Client Portal gateway errors"""

    pass


class GatewayRequestError(GatewayClientError):
    """Raised when an HTTP request to the gateway fails

    Covers network failures and non-2xx responses. ``status_code`` is None
    when the request never produced a response.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GatewayConnectionError(GatewayClientError):
    """Raised when the gateway reports no brokerage session

    Requires the user to log in to the gateway again; never retried.
    """

    pass


class GatewayAuthenticationError(GatewayClientError):
    """Raised when the session is connected but not authenticated"""

    pass


class SessionExpiredError(GatewayClientError):
    """Raised when SSO validation reports no remaining expiry"""

    pass


class SessionDisconnectedError(GatewayClientError):
    """Raised by the heartbeat when the session is no longer alive"""

    pass


class HeartbeatError(GatewayClientError):
    """Raised when the heartbeat lifecycle is misused"""

    pass


class OrderError(IBCPError):
    """Raised when order placement fails"""

    pass
