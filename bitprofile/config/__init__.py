"""
bitprofile configuration package.

Exports:
    BitProfileConfig: Environment-driven settings dataclass
    get_config / reload_config: Process-wide settings accessors
    setup_logging / configure_from_config / get_logger / LogContext: Logging helpers
"""

from bitprofile.config.logging_config import (
    LogContext,
    configure_from_config,
    get_logger,
    setup_logging,
)
from bitprofile.config.settings import BitProfileConfig, get_config, reload_config

__all__ = [
    "BitProfileConfig",
    "get_config",
    "reload_config",
    "setup_logging",
    "configure_from_config",
    "get_logger",
    "LogContext",
]
