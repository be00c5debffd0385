"""Typed views of gateway account, portfolio and order payloads"""

from dataclasses import dataclass, field
from typing import Any


def _float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass
class OrderRequest:
    """A single order ticket for /iserver/account/{accountId}/orders"""

    conid: int
    side: str
    quantity: float
    order_type: str = "MKT"
    price: float | None = None
    aux_price: float | None = None
    tif: str = "DAY"
    outside_rth: bool = False
    c_oid: str | None = None

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "conid": int(self.conid),
            "orderType": self.order_type,
            "side": self.side.upper(),
            "quantity": self.quantity,
            "tif": self.tif,
            "outsideRTH": self.outside_rth,
        }
        if self.price is not None:
            payload["price"] = self.price
        if self.aux_price is not None:
            payload["auxPrice"] = self.aux_price
        if self.c_oid:
            payload["cOID"] = self.c_oid
        return payload


@dataclass
class OrderReply:
    """One element of an order placement response

    Either an accepted order (``order_id`` set) or a question the gateway
    wants answered before submitting (``reply_id`` and ``messages`` set).
    """

    order_id: str | None = None
    order_status: str | None = None
    local_order_id: str | None = None
    reply_id: str | None = None
    messages: list[str] = field(default_factory=list)

    @property
    def needs_confirmation(self) -> bool:
        return self.order_id is None and self.reply_id is not None

    @classmethod
    def from_response(cls, item: dict) -> "OrderReply":
        messages = item.get("message") or []
        if isinstance(messages, str):
            messages = [messages]
        order_id = item.get("order_id")
        reply_id = item.get("id")
        return cls(
            order_id=str(order_id) if order_id is not None else None,
            order_status=item.get("order_status"),
            local_order_id=item.get("local_order_id"),
            reply_id=str(reply_id) if reply_id is not None else None,
            messages=[str(m) for m in messages],
        )


@dataclass
class LiveOrder:
    """An order from /iserver/account/orders"""

    order_id: str
    conid: int | None = None
    ticker: str = ""
    side: str = ""
    status: str = ""
    order_type: str = ""
    total_size: float | None = None
    filled_quantity: float | None = None
    remaining_quantity: float | None = None
    price: float | None = None

    @classmethod
    def from_response(cls, item: dict) -> "LiveOrder":
        conid = item.get("conid")
        return cls(
            order_id=str(item.get("orderId", "")),
            conid=int(conid) if conid is not None else None,
            ticker=item.get("ticker", ""),
            side=item.get("side", ""),
            status=item.get("status", ""),
            order_type=item.get("orderType", ""),
            total_size=_float(item.get("totalSize")),
            filled_quantity=_float(item.get("filledQuantity")),
            remaining_quantity=_float(item.get("remainingQuantity")),
            price=_float(item.get("price")),
        )


@dataclass
class TradeAccount:
    """Brokerage accounts from /iserver/accounts"""

    accounts: list[str] = field(default_factory=list)
    selected_account: str = ""
    aliases: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_response(cls, payload: Any) -> "TradeAccount":
        if not isinstance(payload, dict):
            return cls()
        return cls(
            accounts=list(payload.get("accounts") or []),
            selected_account=payload.get("selectedAccount") or "",
            aliases=dict(payload.get("aliases") or {}),
        )


@dataclass
class PortfolioAccount:
    """An account from /portfolio/accounts"""

    account_id: str
    account_title: str = ""
    account_type: str = ""
    currency: str = ""

    @classmethod
    def from_response(cls, item: dict) -> "PortfolioAccount":
        return cls(
            account_id=item.get("accountId") or item.get("id") or "",
            account_title=item.get("accountTitle", ""),
            account_type=item.get("type", ""),
            currency=item.get("currency", ""),
        )


@dataclass
class Position:
    """An open position from /portfolio/{accountId}/positions/{pageId}"""

    account_id: str
    conid: int
    description: str = ""
    position: float = 0.0
    market_price: float | None = None
    market_value: float | None = None
    average_cost: float | None = None
    unrealized_pnl: float | None = None
    realized_pnl: float | None = None
    currency: str = ""

    @classmethod
    def from_response(cls, item: dict) -> "Position":
        return cls(
            account_id=item.get("acctId", ""),
            conid=int(item.get("conid", 0)),
            description=item.get("contractDesc", ""),
            position=_float(item.get("position")) or 0.0,
            market_price=_float(item.get("mktPrice")),
            market_value=_float(item.get("mktValue")),
            average_cost=_float(item.get("avgCost")),
            unrealized_pnl=_float(item.get("unrealizedPnl")),
            realized_pnl=_float(item.get("realizedPnl")),
            currency=item.get("currency", ""),
        )
