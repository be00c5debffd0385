"""Tests for the background Heartbeat"""

import asyncio

import httpx
import pytest

from ibcp.infrastructure.gateway.heartbeat import Heartbeat, HeartbeatStatus
from ibcp.infrastructure.gateway.requests import GatewayRequestClient
from ibcp.infrastructure.gateway.session import SessionState, SessionStateStore
from ibcp.shared.exceptions import (
    GatewayRequestError,
    HeartbeatError,
    SessionDisconnectedError,
)
from tests.factories import GATEWAY_URL, TICKLE, Reply, tickle_body


@pytest.fixture
def state_store():
    return SessionStateStore(SessionState(connected=True, authenticated=True))


@pytest.mark.unit
def test_heartbeat_initial_state(request_client, state_store):
    heartbeat = Heartbeat(request_client, state_store, interval=60)

    assert heartbeat.status is HeartbeatStatus.NOT_STARTED
    assert heartbeat.is_running is False
    assert heartbeat.task is None
    assert heartbeat.error is None
    assert heartbeat.tick_count == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_disconnect_after_three_ticks_ends_on_fourth(
    fake_gateway, request_client, state_store
):
    fake_gateway.add(
        "POST",
        TICKLE,
        tickle_body(),
        tickle_body(),
        tickle_body(),
        tickle_body(connected=False),
    )
    heartbeat = Heartbeat(request_client, state_store, interval=0.01)

    heartbeat.start()
    with pytest.raises(SessionDisconnectedError):
        await heartbeat.wait()

    assert heartbeat.tick_count == 4
    assert fake_gateway.count("POST", TICKLE) == 4
    assert heartbeat.status is HeartbeatStatus.STOPPED
    assert isinstance(heartbeat.error, SessionDisconnectedError)
    assert state_store.snapshot.connected is False

    # No further calls once stopped
    await asyncio.sleep(0.05)
    assert fake_gateway.count("POST", TICKLE) == 4


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unauthenticated_response_ends_heartbeat(
    fake_gateway, request_client, state_store
):
    fake_gateway.add("POST", TICKLE, tickle_body(authenticated=False))
    heartbeat = Heartbeat(request_client, state_store, interval=0.01)

    heartbeat.start()
    with pytest.raises(SessionDisconnectedError):
        await heartbeat.wait()

    assert heartbeat.tick_count == 1
    assert state_store.snapshot.connected is True
    assert state_store.snapshot.authenticated is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_transport_error_ends_heartbeat_and_keeps_state(
    fake_gateway, request_client, state_store
):
    fake_gateway.add("POST", TICKLE, tickle_body(), Reply(500, {"error": "down"}))
    heartbeat = Heartbeat(request_client, state_store, interval=0.01)
    heartbeat.start()

    with pytest.raises(GatewayRequestError):
        await heartbeat.wait()

    assert heartbeat.tick_count == 2
    assert isinstance(heartbeat.error, GatewayRequestError)
    assert state_store.snapshot.is_ready is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_network_error_ends_heartbeat(fake_gateway, request_client, state_store):
    fake_gateway.add("POST", TICKLE, httpx.ConnectError("gateway gone"))
    heartbeat = Heartbeat(request_client, state_store, interval=0.01)
    heartbeat.start()

    with pytest.raises(GatewayRequestError):
        await heartbeat.wait()

    assert heartbeat.status is HeartbeatStatus.STOPPED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_stop_ends_heartbeat_without_error(
    fake_gateway, request_client, state_store
):
    fake_gateway.add("POST", TICKLE, tickle_body())
    heartbeat = Heartbeat(request_client, state_store, interval=0.01)
    heartbeat.start()
    await asyncio.sleep(0.05)

    await heartbeat.stop()
    calls_at_stop = fake_gateway.count("POST", TICKLE)

    assert heartbeat.status is HeartbeatStatus.STOPPED
    assert heartbeat.error is None
    await heartbeat.wait()

    await asyncio.sleep(0.05)
    assert fake_gateway.count("POST", TICKLE) == calls_at_stop


@pytest.mark.unit
@pytest.mark.asyncio
async def test_stop_interrupts_interval_wait(fake_gateway, request_client, state_store):
    fake_gateway.add("POST", TICKLE, tickle_body())
    heartbeat = Heartbeat(request_client, state_store, interval=60)
    heartbeat.start()
    await asyncio.sleep(0)

    await asyncio.wait_for(heartbeat.stop(), timeout=1)

    assert heartbeat.status is HeartbeatStatus.STOPPED
    assert fake_gateway.count("POST", TICKLE) == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_start_twice_reuses_running_task(request_client, state_store):
    heartbeat = Heartbeat(request_client, state_store, interval=60)

    first = heartbeat.start()
    second = heartbeat.start()

    assert first is second
    await heartbeat.stop()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_stopped_heartbeat_cannot_restart(request_client, state_store):
    heartbeat = Heartbeat(request_client, state_store, interval=60)
    heartbeat.start()
    await heartbeat.stop()

    with pytest.raises(HeartbeatError):
        heartbeat.start()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_stop_before_start_prevents_start(request_client, state_store):
    heartbeat = Heartbeat(request_client, state_store, interval=60)

    await heartbeat.stop()

    assert heartbeat.status is HeartbeatStatus.STOPPED
    with pytest.raises(HeartbeatError):
        heartbeat.start()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_wait_before_start_raises(request_client, state_store):
    heartbeat = Heartbeat(request_client, state_store, interval=60)

    with pytest.raises(HeartbeatError):
        await heartbeat.wait()


def slow_tickle_client(started: asyncio.Event, delay: float) -> GatewayRequestClient:
    """Request client whose tickle takes ``delay`` seconds to answer"""

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(delay)
        return httpx.Response(200, json=tickle_body())

    return GatewayRequestClient(
        base_url=GATEWAY_URL, transport=httpx.MockTransport(handler)
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_stop_lets_in_flight_tickle_finish(state_store):
    started = asyncio.Event()
    request_client = slow_tickle_client(started, delay=0.05)
    heartbeat = Heartbeat(request_client, state_store, interval=0.01, stop_timeout=1.0)
    heartbeat.start()

    await started.wait()
    await heartbeat.stop()

    assert heartbeat.status is HeartbeatStatus.STOPPED
    assert heartbeat.task.cancelled() is False
    assert heartbeat.error is None
    assert heartbeat.tick_count == 1
    await request_client.aclose()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_stop_cancels_tickle_after_stop_timeout(state_store):
    started = asyncio.Event()
    request_client = slow_tickle_client(started, delay=5)
    heartbeat = Heartbeat(
        request_client, state_store, interval=0.01, stop_timeout=0.01
    )
    heartbeat.start()

    await started.wait()
    await asyncio.wait_for(heartbeat.stop(), timeout=1)

    assert heartbeat.status is HeartbeatStatus.STOPPED
    assert heartbeat.task.cancelled() is True
    await request_client.aclose()
