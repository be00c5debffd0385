"""Configuration management for the Client Portal gateway client"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from loguru import logger

from ibcp.shared.exceptions import ConfigurationError

# Ordered from least to most verbose; index matches the gateway client's
# numeric levels (0=errors only ... 3=debug)
LOG_LEVELS = ("ERROR", "WARNING", "INFO", "DEBUG")

DEFAULT_BASE_URL = "https://localhost:5000"


def normalize_log_level(value: str | int) -> str:
    """Return the canonical level name for a name or numeric level

    Args:
        value: Level name (case-insensitive) or integer 0-3

    Returns:
        One of LOG_LEVELS

    Raises:
        ConfigurationError: If the value is not a known level
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid log level: {value!r}")

    if isinstance(value, int):
        if 0 <= value < len(LOG_LEVELS):
            return LOG_LEVELS[value]
        raise ConfigurationError(f"Invalid log level: {value!r}")

    text = str(value).strip().upper()
    if text.isdigit():
        return normalize_log_level(int(text))
    if text == "WARN":
        text = "WARNING"
    if text not in LOG_LEVELS:
        raise ConfigurationError(f"Invalid log level: {value!r}")
    return text


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    text = raw.strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass
class GatewayConfig:
    """Settings for connecting to a Client Portal gateway"""

    base_url: str = DEFAULT_BASE_URL
    log_level: str | int = "INFO"

    # Start the background heartbeat once connected
    auto_tickle: bool = True

    # The local gateway serves a self-signed certificate
    verify_ssl: bool = False

    # Per-request timeout (seconds), independent of the heartbeat interval
    request_timeout: float = 10.0

    # Seconds between heartbeat calls
    tickle_interval: float = 60.0

    # Seconds to let the gateway settle after a re-authentication request
    reauth_grace_period: float = 3.0

    # Re-authentication requests allowed per connect() call
    max_reauth_attempts: int = 2

    def __post_init__(self) -> None:
        self.log_level = normalize_log_level(self.log_level)
        self.base_url = self.base_url.rstrip("/") or DEFAULT_BASE_URL
        if self.max_reauth_attempts < 0:
            raise ConfigurationError("max_reauth_attempts must not be negative")

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "GatewayConfig":
        """Load configuration from environment variables

        Args:
            env_file: Optional .env file; variables already set take priority

        Returns:
            GatewayConfig with values from environment, defaults otherwise

        Raises:
            ConfigurationError: If an environment variable is invalid
        """
        if env_file:
            load_dotenv(env_file, override=False)

        config = cls(
            base_url=os.getenv("IBCP_BASE_URL") or DEFAULT_BASE_URL,
            log_level=os.getenv("IBCP_LOG_LEVEL") or "INFO",
            auto_tickle=_env_bool("IBCP_AUTO_TICKLE", True),
            verify_ssl=_env_bool("IBCP_VERIFY_SSL", False),
            request_timeout=_env_float("IBCP_REQUEST_TIMEOUT", 10.0),
            tickle_interval=_env_float("IBCP_TICKLE_INTERVAL", 60.0),
            reauth_grace_period=_env_float("IBCP_REAUTH_GRACE", 3.0),
        )

        logger.debug("Configuration loaded:")
        logger.debug(f"  Gateway URL: {config.base_url}")
        logger.debug(f"  Log Level: {config.log_level}")
        logger.debug(f"  Auto Tickle: {config.auto_tickle}")
        logger.debug(f"  Verify SSL: {config.verify_ssl}")
        logger.debug(f"  Request Timeout: {config.request_timeout}s")
        logger.debug(f"  Tickle Interval: {config.tickle_interval}s")

        return config
