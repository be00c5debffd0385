"""Core configuration and logging."""

from .config import DEFAULT_BASE_URL, LOG_LEVELS, GatewayConfig
from .logging import install_logging_bridge, setup_logging

__all__ = [
    "DEFAULT_BASE_URL",
    "LOG_LEVELS",
    "GatewayConfig",
    "install_logging_bridge",
    "setup_logging",
]
