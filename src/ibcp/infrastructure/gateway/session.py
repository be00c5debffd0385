"""Session state shared between foreground calls and the heartbeat"""

import asyncio
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of the gateway session

    ``authenticated`` is forced to False whenever ``connected`` is False.
    """

    connected: bool = False
    authenticated: bool = False
    competing: bool = False
    message: str = ""
    last_checked_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.authenticated and not self.connected:
            object.__setattr__(self, "authenticated", False)

    @property
    def is_ready(self) -> bool:
        """True when the session can serve brokerage requests"""
        return self.connected and self.authenticated

    @classmethod
    def from_auth_status(cls, payload: Any) -> "SessionState":
        """Build a snapshot from an ``authStatus`` payload

        Accepts both the bare /iserver/auth/status body and a /tickle body,
        where the status sits under ``iserver.authStatus``.
        """
        status: Any = payload
        if isinstance(payload, dict) and "iserver" in payload:
            status = (payload.get("iserver") or {}).get("authStatus") or {}
        if not isinstance(status, dict):
            status = {}

        return cls(
            connected=bool(status.get("connected", False)),
            authenticated=bool(status.get("authenticated", False)),
            competing=bool(status.get("competing", False)),
            message=str(status.get("message") or ""),
            last_checked_at=datetime.now(timezone.utc),
        )


@dataclass(frozen=True)
class SSOValidation:
    """Result of /sso/validate

    ``expires`` is the remaining session lifetime in milliseconds; 0 means
    the session has expired.
    """

    user_id: int | None = None
    user_name: str = ""
    paper_user_name: str = ""
    result: bool = False
    expires: int = 0

    @classmethod
    def from_response(cls, payload: Any) -> "SSOValidation":
        if not isinstance(payload, dict):
            return cls()

        try:
            expires = int(payload.get("EXPIRES") or 0)
        except (TypeError, ValueError):
            expires = 0

        try:
            user_id = int(payload["USER_ID"])
        except (KeyError, TypeError, ValueError):
            user_id = None

        return cls(
            user_id=user_id,
            user_name=str(payload.get("USER_NAME") or ""),
            paper_user_name=str(payload.get("PAPER_USER_NAME") or ""),
            result=bool(payload.get("RESULT", False)),
            expires=expires,
        )


class SessionStateStore:
    """Single owner of a client's SessionState

    Writers replace the snapshot under a lock; readers get the current
    snapshot, which is immutable and therefore never torn.
    """

    def __init__(self, initial: SessionState | None = None) -> None:
        self._state = initial or SessionState()
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> SessionState:
        return self._state

    async def replace(self, state: SessionState) -> SessionState:
        """Overwrite the state wholesale"""
        async with self._lock:
            self._state = state
            return state

    async def update(self, **changes: Any) -> SessionState:
        """Apply field changes on top of the current state"""
        async with self._lock:
            self._state = replace(
                self._state,
                last_checked_at=datetime.now(timezone.utc),
                **changes,
            )
            return self._state

    async def reset(self) -> SessionState:
        """Mark the session as gone"""
        return await self.update(
            connected=False, authenticated=False, competing=False
        )
