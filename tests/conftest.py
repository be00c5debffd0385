"""Pytest fixtures for ibcp tests"""

import pytest

from ibcp.core.config import GatewayConfig
from ibcp.infrastructure.gateway.requests import GatewayRequestClient
from tests.factories import GATEWAY_URL, FakeGateway


@pytest.fixture
def fake_gateway() -> FakeGateway:
    """Scripted gateway; tests add the routes they need"""
    return FakeGateway()


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Config with the heartbeat off and a short tickle interval"""
    return GatewayConfig(
        base_url=GATEWAY_URL,
        auto_tickle=False,
        tickle_interval=0.01,
        reauth_grace_period=3.0,
    )


@pytest.fixture
def request_client(fake_gateway) -> GatewayRequestClient:
    """Request client wired to the fake gateway"""
    return GatewayRequestClient(
        base_url=GATEWAY_URL, transport=fake_gateway.transport
    )
