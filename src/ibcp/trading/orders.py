"""Order placement and live order queries"""

from loguru import logger

from ibcp.infrastructure.gateway.endpoints import Endpoint
from ibcp.infrastructure.protocols import GatewaySession
from ibcp.shared.exceptions import OrderError

from .accounts import GatewayAccounts
from .models import LiveOrder, OrderReply, OrderRequest


class GatewayOrders:
    """Order operations against the selected trade account"""

    def __init__(
        self, session: GatewaySession, accounts: GatewayAccounts
    ) -> None:
        """Initialize orders service

        Args:
            session: An authenticated gateway session
            accounts: Account lookups used to resolve the trade account
        """
        self.session = session
        self.accounts = accounts

    async def place_order(self, order: OrderRequest) -> list[OrderReply]:
        """Submit an order to the selected trade account

        Returns:
            One reply per gateway response element. Replies with
            ``needs_confirmation`` are questions the gateway wants answered
            before the order is live.

        Raises:
            OrderError: If no trade account is selected or the response is
                not understood
            GatewayClientError: If the session or request fails
        """
        account_id = await self.accounts.get_selected_account()
        if not account_id:
            logger.error("Not able to find selected trade account")
            raise OrderError("No selected trade account")

        payload = {"orders": [order.to_payload()]}
        logger.info(
            f"Placing {order.order_type} order: {order.side} {order.quantity} "
            f"conid={order.conid} on {account_id}"
        )

        response = await self.session.request(
            Endpoint.PLACE_ORDER,
            data=payload,
            path_params={"accountId": account_id},
        )
        logger.info(f"Order response: {response}")

        if isinstance(response, dict):
            if "error" in response:
                raise OrderError(f"Order rejected: {response['error']}")
            response = [response]
        if not isinstance(response, list):
            raise OrderError(f"Unexpected order response format: {response}")

        return [
            OrderReply.from_response(item)
            for item in response
            if isinstance(item, dict)
        ]

    async def get_live_orders(self) -> list[LiveOrder]:
        """Query orders working or filled in the current session"""
        response = await self.session.request(Endpoint.LIVE_ORDERS)
        orders = response.get("orders") if isinstance(response, dict) else None
        return [
            LiveOrder.from_response(item)
            for item in orders or []
            if isinstance(item, dict)
        ]
