"""
Configuration management for apilink.

Handles loading and validation of configuration files.
"""

from apilink.config.settings import (
    ApiConfig,
    LoggingConfig,
    drop_header,
    get_default_config,
    get_default_config_path,
    load_config,
    merge_header,
)

__all__ = [
    "ApiConfig",
    "LoggingConfig",
    "drop_header",
    "get_default_config",
    "get_default_config_path",
    "load_config",
    "merge_header",
]
