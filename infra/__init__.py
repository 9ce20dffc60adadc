"""
Infrastructure module exports.

Configuration and bootstrap for the document and notify backends.
"""

from .config import AppConfig, ConfigError, DocumentBackendType, get_config
from .bootstrap import AppBootstrap, get_bootstrap

__all__ = [
    "AppConfig",
    "ConfigError",
    "DocumentBackendType",
    "get_config",
    "AppBootstrap",
    "get_bootstrap",
]
