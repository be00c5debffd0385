"""Tests for trading payload models"""

import pytest

from ibcp.trading.models import (
    OrderReply,
    OrderRequest,
    PortfolioAccount,
    TradeAccount,
)


@pytest.mark.unit
def test_order_request_payload_includes_optional_prices():
    order = OrderRequest(
        conid=265598,
        side="sell",
        quantity=5,
        order_type="STP LMT",
        price=180.0,
        aux_price=181.0,
        tif="GTC",
        c_oid="my-order-1",
    )

    payload = order.to_payload()

    assert payload["side"] == "SELL"
    assert payload["price"] == 180.0
    assert payload["auxPrice"] == 181.0
    assert payload["tif"] == "GTC"
    assert payload["cOID"] == "my-order-1"


@pytest.mark.unit
def test_market_order_payload_omits_prices():
    payload = OrderRequest(conid=265598, side="BUY", quantity=1).to_payload()

    assert "price" not in payload
    assert "auxPrice" not in payload
    assert "cOID" not in payload
    assert payload["orderType"] == "MKT"


@pytest.mark.unit
def test_order_reply_accepts_single_message_string():
    reply = OrderReply.from_response({"id": "abc", "message": "Confirm?"})

    assert reply.messages == ["Confirm?"]
    assert reply.needs_confirmation is True


@pytest.mark.unit
def test_trade_account_from_non_dict_is_empty():
    trade_account = TradeAccount.from_response(["DU1234567"])

    assert trade_account.accounts == []
    assert trade_account.selected_account == ""


@pytest.mark.unit
def test_portfolio_account_falls_back_to_id():
    account = PortfolioAccount.from_response({"id": "DU1234567", "type": "DEMO"})

    assert account.account_id == "DU1234567"
    assert account.account_type == "DEMO"
