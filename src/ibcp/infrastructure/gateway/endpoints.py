"""Client Portal gateway endpoints"""

from enum import Enum


class Endpoint(Enum):
    """Gateway operations as (HTTP method, path template) pairs

    Path templates use ``{name}`` placeholders filled from path params.
    """

    SSO_VALIDATE = ("GET", "/v1/api/sso/validate")
    SESSION_STATUS = ("GET", "/v1/api/iserver/auth/status")
    REAUTHENTICATE = ("POST", "/v1/api/iserver/reauthenticate")
    LOGOUT = ("POST", "/v1/api/logout")
    TICKLE = ("POST", "/v1/api/tickle")
    PLACE_ORDER = ("POST", "/v1/api/iserver/account/{accountId}/orders")
    LIVE_ORDERS = ("GET", "/v1/api/iserver/account/orders")
    TRADE_ACCOUNTS = ("GET", "/v1/api/iserver/accounts")
    PORTFOLIO_ACCOUNTS = ("GET", "/v1/api/portfolio/accounts")
    PORTFOLIO_POSITIONS = (
        "GET",
        "/v1/api/portfolio/{accountId}/positions/{pageId}",
    )

    @property
    def method(self) -> str:
        return self.value[0]

    @property
    def path(self) -> str:
        return self.value[1]

    def format_path(self, path_params: dict | None = None) -> str:
        """Fill the path template

        Raises:
            ValueError: If a placeholder has no value
        """
        try:
            return self.path.format(**(path_params or {}))
        except KeyError as e:
            raise ValueError(
                f"Missing path parameter {e.args[0]!r} for {self.name}"
            ) from e
