"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

apilink - Unified HTTP Request Client

apilink sends JSON requests and multipart uploads through one interface,
with upload progress reporting, optional response validation and a single
error shape for every transport.
"""

from apilink._version import __version__
from apilink.client import ApiClient, ApiClientBuilder
from apilink.config import ApiConfig, load_config
from apilink.context import ApiProvider, use_api
from apilink.exceptions import (
    ApiLinkError,
    ConfigurationError,
    InvalidConfigurationError,
    RequestError,
    TransportError,
    ValidationError,
)
from apilink.progress import ProgressRelay
from apilink.transports import JsonBody, MultipartBody

__all__ = [
    "__version__",
    "ApiClient",
    "ApiClientBuilder",
    "ApiConfig",
    "ApiLinkError",
    "ApiProvider",
    "ConfigurationError",
    "InvalidConfigurationError",
    "JsonBody",
    "MultipartBody",
    "ProgressRelay",
    "RequestError",
    "TransportError",
    "ValidationError",
    "load_config",
    "use_api",
]
