"""GatewayConnectionManager - Session lifecycle and keepalive"""

import asyncio
from typing import TYPE_CHECKING

from loguru import logger

from ibcp.core.config import GatewayConfig
from ibcp.shared.exceptions import (
    GatewayAuthenticationError,
    GatewayConnectionError,
    SessionExpiredError,
)

from .endpoints import Endpoint
from .heartbeat import Heartbeat
from .session import SessionState, SessionStateStore, SSOValidation

if TYPE_CHECKING:
    from .requests import GatewayRequestClient


class GatewayConnectionManager:
    """Manages the gateway session lifecycle

    Responsibilities:
    - SSO validation and session status polling
    - Bounded re-authentication while connecting
    - Heartbeat management
    - Logout and teardown

    The only writer of the client's SessionState (together with the
    heartbeat it owns).
    """

    def __init__(
        self,
        request_client: "GatewayRequestClient",
        config: GatewayConfig | None = None,
        state_store: SessionStateStore | None = None,
    ) -> None:
        """Initialize connection manager

        Args:
            request_client: Request client for HTTP calls
            config: Gateway settings (defaults if omitted)
            state_store: Session state owner (a fresh one if omitted)
        """
        self._request_client = request_client
        self._config = config or GatewayConfig()
        self._state_store = state_store or SessionStateStore()
        self._heartbeat: Heartbeat | None = None
        self._user: SSOValidation | None = None

    @property
    def state(self) -> SessionState:
        """Consistent snapshot of the current session state"""
        return self._state_store.snapshot

    @property
    def is_connected(self) -> bool:
        return self.state.is_ready

    @property
    def user(self) -> SSOValidation | None:
        """SSO details captured by the last successful connect()"""
        return self._user

    @property
    def heartbeat(self) -> Heartbeat | None:
        return self._heartbeat

    async def connect(self) -> SessionState:
        """Bring the session to connected-and-authenticated

        Steps:
        1. GET /sso/validate
        2. GET /iserver/auth/status
        3. If connected but not authenticated: POST /iserver/reauthenticate,
           wait the grace period and poll again (bounded)
        4. Start the heartbeat if auto_tickle is enabled

        Returns:
            The session state that satisfied the connection

        Raises:
            GatewayRequestError: If any gateway call fails
            GatewayConnectionError: If the gateway has no brokerage session
            GatewayAuthenticationError: If re-authentication attempts run out
        """
        logger.info(f"Connecting to gateway at {self._config.base_url}...")

        try:
            self._user = await self.validate_sso()
        except Exception as e:
            logger.error(f"Failed to validate SSO: {e}")
            raise

        attempts = 0
        max_attempts = self._config.max_reauth_attempts
        while True:
            state = await self.session_status()

            if not state.connected:
                logger.error(
                    "Not connected to gateway, please log in to the CP web gateway again"
                )
                raise GatewayConnectionError(
                    "Not connected to gateway, please log in to the CP web gateway again"
                )

            if state.authenticated:
                break

            if attempts >= max_attempts:
                logger.error(
                    f"Session still not authenticated after {attempts} re-authentication attempts"
                )
                raise GatewayAuthenticationError(
                    f"Session not authenticated after {attempts} re-authentication attempts"
                )

            attempts += 1
            logger.warning(
                f"Session not authenticated - re-authenticating ({attempts}/{max_attempts})"
            )
            await self.reauthenticate()
            await asyncio.sleep(self._config.reauth_grace_period)

        if state.competing:
            logger.warning("Another session is competing for this login")

        logger.info("Session connected and authenticated")

        if self._config.auto_tickle:
            self.start_heartbeat()

        return state

    async def validate_sso(self) -> SSOValidation:
        """Validate the single sign-on session"""
        response = await self._request_client.request(Endpoint.SSO_VALIDATE)
        return SSOValidation.from_response(response)

    async def session_status(self) -> SessionState:
        """Refresh session state from the gateway

        Overwrites the stored state wholesale. No retry.
        """
        response = await self._request_client.request(Endpoint.SESSION_STATUS)
        state = await self._state_store.replace(
            SessionState.from_auth_status(response)
        )
        logger.info(
            f"Session status: connected={state.connected} "
            f"authenticated={state.authenticated} competing={state.competing}"
        )
        return state

    async def tickle(self) -> SSOValidation:
        """Check the session is still valid

        Call this periodically when auto_tickle is disabled.

        Raises:
            SessionExpiredError: If the gateway reports no remaining expiry
            GatewayRequestError: If the request fails
        """
        sso = await self.validate_sso()
        logger.info(f"Tickle: {sso}")

        if not sso.expires:
            await self._state_store.update(authenticated=False)
            raise SessionExpiredError("Session expired")
        return sso

    async def reauthenticate(self) -> None:
        """Ask the gateway to re-authenticate the brokerage session

        Does not poll status afterwards.
        """
        try:
            response = await self._request_client.request(Endpoint.REAUTHENTICATE)
        except Exception:
            logger.error("Not able to re-authenticate with the gateway")
            raise
        logger.debug(f"Reauthenticate: {response}")

    async def logout(self) -> None:
        """End the gateway session

        Stops the heartbeat first so it cannot tickle a dead session, then
        marks the session as disconnected once the gateway confirms.
        """
        await self.stop_heartbeat()

        response = await self._request_client.request(Endpoint.LOGOUT)
        logger.info(f"Logout: {response}")

        await self._state_store.reset()

    def start_heartbeat(self) -> Heartbeat:
        """Start the background heartbeat unless one is already running"""
        if self._heartbeat is not None and self._heartbeat.is_running:
            logger.warning("Heartbeat already running")
            return self._heartbeat

        self._heartbeat = Heartbeat(
            self._request_client,
            self._state_store,
            interval=self._config.tickle_interval,
            stop_timeout=self._config.request_timeout,
        )
        self._heartbeat.start()
        return self._heartbeat

    async def stop_heartbeat(self) -> None:
        if self._heartbeat is not None:
            await self._heartbeat.stop()

    async def disconnect(self) -> None:
        """Stop the heartbeat and release the HTTP client

        Does not log out of the gateway.
        """
        logger.info("Disconnecting from gateway...")
        await self.stop_heartbeat()
        await self._request_client.aclose()
        await self._state_store.reset()
        logger.info("Disconnected from gateway")

    def require_authenticated(self) -> SessionState:
        """Return the current state, or raise if it cannot serve requests

        Raises:
            GatewayAuthenticationError: If not connected and authenticated
        """
        state = self.state
        if not state.is_ready:
            raise GatewayAuthenticationError(
                "Session not authenticated - call connect() first"
            )
        return state
