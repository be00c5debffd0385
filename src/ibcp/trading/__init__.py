"""Account, portfolio and order operations over a gateway session."""

from .accounts import GatewayAccounts
from .models import (
    LiveOrder,
    OrderReply,
    OrderRequest,
    PortfolioAccount,
    Position,
    TradeAccount,
)
from .orders import GatewayOrders

__all__ = [
    "GatewayAccounts",
    "GatewayOrders",
    "LiveOrder",
    "OrderReply",
    "OrderRequest",
    "PortfolioAccount",
    "Position",
    "TradeAccount",
]
