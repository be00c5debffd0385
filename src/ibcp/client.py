"""GatewayClient - entry point for a Client Portal gateway session"""

from typing import Any

import httpx

from ibcp.core.config import GatewayConfig
from ibcp.core.logging import setup_logging
from ibcp.infrastructure.gateway.connection import GatewayConnectionManager
from ibcp.infrastructure.gateway.endpoints import Endpoint
from ibcp.infrastructure.gateway.heartbeat import Heartbeat
from ibcp.infrastructure.gateway.requests import GatewayRequestClient
from ibcp.infrastructure.gateway.session import SessionState, SSOValidation
from ibcp.trading.accounts import GatewayAccounts
from ibcp.trading.models import (
    LiveOrder,
    OrderReply,
    OrderRequest,
    Position,
    TradeAccount,
)
from ibcp.trading.orders import GatewayOrders


class GatewayClient:
    """Client Portal gateway client (facade)

    Delegates session lifecycle to GatewayConnectionManager and HTTP to
    GatewayRequestClient; account and order calls go through
    GatewayAccounts and GatewayOrders, which only reach the gateway while
    the session is connected and authenticated.

    Each instance owns its session state, so several clients can talk to
    different gateways in one process.

    Satisfies the BrokerConnectionManager and GatewaySession protocols.
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client without contacting the gateway

        Args:
            config: Gateway settings (defaults if omitted)
            transport: Optional httpx transport (for testing)
        """
        self._config = config or GatewayConfig()
        setup_logging(self._config.log_level)

        self._request_client = GatewayRequestClient(
            base_url=self._config.base_url,
            timeout=self._config.request_timeout,
            verify_ssl=self._config.verify_ssl,
            transport=transport,
        )
        self._connection_manager = GatewayConnectionManager(
            self._request_client, self._config
        )
        self.accounts = GatewayAccounts(self)
        self.orders = GatewayOrders(self, self.accounts)

    async def __aenter__(self) -> "GatewayClient":
        try:
            await self.connect()
        except Exception:
            await self.disconnect()
            raise
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.disconnect()

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        """Consistent snapshot of the session state"""
        return self._connection_manager.state

    @property
    def user(self) -> SSOValidation | None:
        return self._connection_manager.user

    @property
    def heartbeat(self) -> Heartbeat | None:
        return self._connection_manager.heartbeat

    @property
    def connection_manager(self) -> GatewayConnectionManager:
        """Access connection manager for testing"""
        return self._connection_manager

    @property
    def request_client(self) -> GatewayRequestClient:
        """Access request client for testing"""
        return self._request_client

    def is_connected(self) -> bool:
        """Check if the session is connected and authenticated"""
        return self._connection_manager.is_connected

    async def connect(self) -> SessionState:
        """Establish an authenticated session with the gateway"""
        return await self._connection_manager.connect()

    async def session_status(self) -> SessionState:
        return await self._connection_manager.session_status()

    async def tickle(self) -> SSOValidation:
        return await self._connection_manager.tickle()

    async def reauthenticate(self) -> None:
        await self._connection_manager.reauthenticate()

    async def logout(self) -> None:
        await self._connection_manager.logout()

    async def disconnect(self) -> None:
        await self._connection_manager.disconnect()

    async def request(
        self,
        endpoint: Endpoint,
        data: dict | list | None = None,
        params: dict | None = None,
        path_params: dict | None = None,
    ) -> Any:
        """Invoke an endpoint on the authenticated session

        Raises:
            GatewayAuthenticationError: If the session is not connected and
                authenticated
            GatewayRequestError: If the request fails
        """
        self._connection_manager.require_authenticated()
        return await self._request_client.request(
            endpoint, data=data, params=params, path_params=path_params
        )

    async def place_order(self, order: OrderRequest) -> list[OrderReply]:
        return await self.orders.place_order(order)

    async def get_live_orders(self) -> list[LiveOrder]:
        return await self.orders.get_live_orders()

    async def get_trade_account(self) -> TradeAccount:
        return await self.accounts.get_trade_account()

    async def get_selected_account(self) -> str:
        return await self.accounts.get_selected_account()

    async def get_portfolio_account(self) -> str:
        return await self.accounts.get_portfolio_account()

    async def get_portfolio_positions(self, page_id: int = 0) -> list[Position]:
        return await self.accounts.get_portfolio_positions(page_id)


async def connect(
    config: GatewayConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GatewayClient:
    """Create a client and connect it

    The heartbeat (if enabled) keeps running in the background after this
    returns; call ``logout()`` or ``disconnect()`` to stop it.

    Raises:
        GatewayRequestError: If the gateway cannot be reached
        GatewayConnectionError: If the user is not logged in to the gateway
        GatewayAuthenticationError: If the session cannot be authenticated
    """
    client = GatewayClient(config, transport=transport)
    try:
        await client.connect()
    except Exception:
        await client.disconnect()
        raise
    return client
