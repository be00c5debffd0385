"""Heartbeat - background keepalive for a gateway session"""

import asyncio
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from ibcp.shared.exceptions import HeartbeatError, SessionDisconnectedError

from .endpoints import Endpoint
from .session import SessionState

if TYPE_CHECKING:
    from .requests import GatewayRequestClient
    from .session import SessionStateStore


class HeartbeatStatus(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


class Heartbeat:
    """Tickles the gateway on a fixed interval until stopped or failed

    Each iteration waits ``interval`` seconds (or until stop() is called),
    POSTs /tickle and applies the returned auth status to the session store.
    The task ends with:
    - the transport error, if the tickle request fails
    - SessionDisconnectedError, if the gateway reports the session as not
      connected or not authenticated
    - no error, if stop() was called

    A stopped heartbeat never restarts; reconnect to get a new one.
    """

    def __init__(
        self,
        request_client: "GatewayRequestClient",
        state_store: "SessionStateStore",
        interval: float = 60.0,
        stop_timeout: float = 10.0,
    ) -> None:
        self._request_client = request_client
        self._state_store = state_store
        self._interval = interval
        # long enough for an in-flight tickle to finish
        self._stop_timeout = stop_timeout

        self._status = HeartbeatStatus.NOT_STARTED
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()
        self._error: BaseException | None = None
        self.tick_count = 0

    @property
    def status(self) -> HeartbeatStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status is HeartbeatStatus.RUNNING

    @property
    def error(self) -> BaseException | None:
        """Exception that terminated the heartbeat, if any"""
        return self._error

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def start(self) -> asyncio.Task:
        """Schedule the heartbeat on the running event loop

        Returns:
            The background task; awaiting it yields the heartbeat outcome

        Raises:
            HeartbeatError: If this heartbeat has already stopped
        """
        if self._status is HeartbeatStatus.RUNNING and self._task is not None:
            logger.warning("Heartbeat already running")
            return self._task
        if self._status is HeartbeatStatus.STOPPED:
            raise HeartbeatError(
                "Heartbeat already stopped - reconnect to start a new one"
            )

        self._status = HeartbeatStatus.RUNNING
        self._task = asyncio.create_task(self._run(), name="IBCPHeartbeat")
        self._task.add_done_callback(self._on_done)
        logger.info("Started session heartbeat")
        return self._task

    async def stop(self, timeout: float | None = None) -> None:
        """Signal the heartbeat to stop and wait for it to finish

        An in-flight tickle gets up to ``timeout`` seconds (default: the
        configured stop timeout) before the task is cancelled.
        """
        if timeout is None:
            timeout = self._stop_timeout
        self._stop_event.set()

        if self._task is None:
            self._status = HeartbeatStatus.STOPPED
            return
        if self._task.done():
            return

        logger.info("Stopping heartbeat...")
        await asyncio.wait({self._task}, timeout=timeout)
        if not self._task.done():
            logger.warning("Heartbeat did not stop gracefully - cancelling")
            self._task.cancel()
            await asyncio.wait({self._task})

    async def wait(self) -> None:
        """Wait for the heartbeat to end

        Raises:
            The exception that terminated the heartbeat, if any
        """
        if self._task is None:
            raise HeartbeatError("Heartbeat was never started")
        await self._task

    async def _wait_for_stop(self) -> bool:
        """Sleep one interval; True if stop was requested meanwhile"""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            return True
        except asyncio.TimeoutError:
            return False

    async def _run(self) -> None:
        logger.info(f"Heartbeat started - will tickle every {self._interval}s")
        try:
            while not await self._wait_for_stop():
                self.tick_count += 1
                response = await self._request_client.request(Endpoint.TICKLE)
                logger.info(f"Tickle #{self.tick_count}: {response}")

                state = await self._state_store.replace(
                    SessionState.from_auth_status(response)
                )
                if not state.is_ready:
                    raise SessionDisconnectedError(
                        f"IB session disconnected (connected={state.connected}, "
                        f"authenticated={state.authenticated})"
                    )
        except Exception as e:
            self._error = e
            logger.error(f"Heartbeat terminated: {e}")
            raise
        finally:
            self._status = HeartbeatStatus.STOPPED
            logger.info("Heartbeat stopped")

    def _on_done(self, task: asyncio.Task) -> None:
        # Mark the outcome as retrieved; callers still see it via wait()
        if not task.cancelled():
            task.exception()
