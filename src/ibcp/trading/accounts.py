"""Account and portfolio lookups"""

from loguru import logger

from ibcp.infrastructure.gateway.endpoints import Endpoint
from ibcp.infrastructure.protocols import GatewaySession
from ibcp.shared.exceptions import GatewayClientError

from .models import PortfolioAccount, Position, TradeAccount


class GatewayAccounts:
    """Brokerage account and portfolio queries"""

    def __init__(self, session: GatewaySession) -> None:
        """Initialize accounts service

        Args:
            session: An authenticated gateway session
        """
        self.session = session

    async def get_trade_account(self) -> TradeAccount:
        """Get the brokerage accounts and the selected one"""
        response = await self.session.request(Endpoint.TRADE_ACCOUNTS)
        return TradeAccount.from_response(response)

    async def get_selected_account(self) -> str:
        """Get the selected trade account ID ("" if none)"""
        try:
            trade_account = await self.get_trade_account()
        except GatewayClientError as e:
            logger.error(f"Could not get iserver trade account info: {e}")
            raise
        return trade_account.selected_account

    async def get_portfolio_accounts(self) -> list[PortfolioAccount]:
        """List the portfolio accounts

        The gateway requires this call before positions can be requested.
        """
        response = await self.session.request(Endpoint.PORTFOLIO_ACCOUNTS)
        if not isinstance(response, list):
            return []
        return [
            PortfolioAccount.from_response(item)
            for item in response
            if isinstance(item, dict)
        ]

    async def get_portfolio_account(self) -> str:
        """Get the first portfolio account ID

        Raises:
            GatewayClientError: If the gateway lists no portfolio accounts
        """
        accounts = await self.get_portfolio_accounts()
        if not accounts:
            logger.error("Could not get portfolio account")
            raise GatewayClientError("No portfolio accounts available")
        # TODO: let callers pick an account once sub-account setups need it
        return accounts[0].account_id

    async def get_portfolio_positions(self, page_id: int = 0) -> list[Position]:
        """Get one page of open positions for the first portfolio account

        Args:
            page_id: Zero-based page of results (the gateway pages by 30)
        """
        account_id = await self.get_portfolio_account()
        response = await self.session.request(
            Endpoint.PORTFOLIO_POSITIONS,
            path_params={"accountId": account_id, "pageId": page_id},
        )
        logger.debug(f"Positions page {page_id} for {account_id}: {response}")
        if not isinstance(response, list):
            return []
        return [
            Position.from_response(item)
            for item in response
            if isinstance(item, dict)
        ]
