"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Request transports.
"""

from apilink.transports.base import (
    BaseTransport,
    BodyKind,
    HttpMethod,
    JsonBody,
    MultipartBody,
    TransportRequest,
    as_request_body,
)
from apilink.transports.mock import MockTransport
from apilink.transports.simple import SimpleBodyTransport
from apilink.transports.streaming import (
    StreamingUploadTransport,
    UploadProgress,
    UploadStream,
)

__all__ = [
    "BaseTransport",
    "BodyKind",
    "HttpMethod",
    "JsonBody",
    "MultipartBody",
    "TransportRequest",
    "as_request_body",
    "MockTransport",
    "SimpleBodyTransport",
    "StreamingUploadTransport",
    "UploadProgress",
    "UploadStream",
]
