"""
Configuration management for apilink.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import os
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

import yaml

from apilink.exceptions import InvalidConfigurationError
from apilink.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_UPLOAD_CHUNK_SIZE = 64 * 1024


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${API_BASE_URL}" -> value of API_BASE_URL env var
        "${API_BASE_URL:http://localhost:8000}" -> value of API_BASE_URL or the default
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:default}
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


def merge_header(headers: Mapping[str, str], name: str, value: str) -> Dict[str, str]:
    """
    Return a copy of ``headers`` with ``name`` set to ``value``.

    Header names compare case-insensitively; any existing spelling of the
    name is replaced so the last write wins.
    """
    merged = {k: v for k, v in headers.items() if k.lower() != name.lower()}
    merged[name] = value
    return merged


def drop_header(headers: Mapping[str, str], name: str) -> Dict[str, str]:
    """Return a copy of ``headers`` without ``name`` (case-insensitive)."""
    return {k: v for k, v in headers.items() if k.lower() != name.lower()}


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    json_format: bool = True


@dataclass(frozen=True)
class ApiConfig:
    """
    Per-client request configuration.

    Instances are immutable; header mutation produces a new config so each
    dispatched request keeps the snapshot it was created with.

    Attributes:
        base_url: Prefix concatenated with every request path
        headers: Header set applied to every request
        include_credentials: Send cookies and auth on simple-body requests
        timeout: httpx client timeout in seconds
        upload_chunk_size: Bytes per chunk on streaming uploads
        logging: Logging configuration
    """

    base_url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    include_credentials: bool = False
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    upload_chunk_size: int = DEFAULT_UPLOAD_CHUNK_SIZE
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        # Collapse names differing only in case; later entries win
        headers: Dict[str, str] = {}
        for name, value in self.headers.items():
            headers = merge_header(headers, name, value)
        object.__setattr__(self, "headers", headers)

    def resolve_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def with_header(self, name: str, value: str) -> "ApiConfig":
        return replace(self, headers=merge_header(self.headers, name, value))

    def without_header(self, name: str) -> "ApiConfig":
        return replace(self, headers=drop_header(self.headers, name))


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.apilink/config.yaml")


def get_default_config() -> ApiConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        ApiConfig: Default configuration object
    """
    return ApiConfig(
        base_url="",
        headers={},
        include_credentials=False,
        timeout=DEFAULT_TIMEOUT_SECONDS,
        upload_chunk_size=DEFAULT_UPLOAD_CHUNK_SIZE,
        logging=LoggingConfig(),
    )


def load_config(config_path: Optional[str] = None) -> ApiConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        ApiConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(config_path)

    if not os.path.exists(config_path):
        logger.info(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}", exc_info=True)
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}", exc_info=True)
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e

    if config_data is None:
        logger.info(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping at the top level"
        )

    config_data = _expand_env_vars(config_data)
    logger.debug("Expanded environment variables in configuration")

    config = _build_config_from_dict(config_data)
    _validate_config(config)
    logger.info(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _build_config_from_dict(config_data: Dict[str, Any]) -> ApiConfig:
    """
    Build ApiConfig from dictionary loaded from YAML.

    Merges user configuration with defaults.

    Args:
        config_data: Dictionary loaded from YAML file

    Returns:
        ApiConfig: Configuration object

    Raises:
        InvalidConfigurationError: If a section has the wrong shape
    """
    default_config = get_default_config()

    api_data = config_data.get('api') or {}
    if not isinstance(api_data, dict):
        raise InvalidConfigurationError("'api' section must be a mapping")

    headers_data = api_data.get('headers') or {}
    if not isinstance(headers_data, dict):
        raise InvalidConfigurationError("'api.headers' must be a mapping of header names to values")

    headers: Dict[str, str] = {}
    for name, value in headers_data.items():
        headers = merge_header(headers, str(name), str(value))

    try:
        timeout = float(api_data.get('timeout', default_config.timeout))
        chunk_size = int(api_data.get('upload_chunk_size', default_config.upload_chunk_size))
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"Invalid numeric value in 'api' section: {e}") from e

    logging_data = config_data.get('logging') or {}
    if not isinstance(logging_data, dict):
        raise InvalidConfigurationError("'logging' section must be a mapping")

    logging_config = LoggingConfig(
        level=str(logging_data.get('level', default_config.logging.level)),
        file=str(logging_data.get('file', default_config.logging.file)),
        json_format=_as_bool(logging_data.get('json_format', default_config.logging.json_format)),
    )

    return ApiConfig(
        base_url=str(api_data.get('base_url', default_config.base_url)),
        headers=headers,
        include_credentials=_as_bool(
            api_data.get('include_credentials', default_config.include_credentials)
        ),
        timeout=timeout,
        upload_chunk_size=chunk_size,
        logging=logging_config,
    )


def _as_bool(value: Any) -> bool:
    # Environment expansion turns booleans into strings
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _validate_config(config: ApiConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    if config.timeout <= 0:
        logger.error("Configuration validation failed: timeout must be positive")
        raise InvalidConfigurationError(
            f"timeout must be positive, got {config.timeout}"
        )

    if config.upload_chunk_size < 1:
        logger.error("Configuration validation failed: upload_chunk_size must be at least 1")
        raise InvalidConfigurationError(
            f"upload_chunk_size must be at least 1, got {config.upload_chunk_size}"
        )

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.logging.level.upper() not in valid_log_levels:
        raise InvalidConfigurationError(
            f"Invalid log level '{config.logging.level}'. "
            f"Must be one of: {', '.join(valid_log_levels)}"
        )
