"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Transport base class and request data structures.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple, Union

from urllib3 import encode_multipart_formdata

ProgressCallback = Callable[[float], None]


class HttpMethod(str, Enum):
    """HTTP verbs supported by the dispatcher."""
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


class BodyKind(str, Enum):
    """Payload kinds; each kind is served by exactly one transport."""
    JSON = "json"
    MULTIPART = "multipart"


@dataclass(frozen=True)
class JsonBody:
    """A structured value sent as a JSON document."""
    kind: ClassVar[BodyKind] = BodyKind.JSON

    value: Any

    def encode(self) -> bytes:
        return json.dumps(self.value).encode("utf-8")


@dataclass
class MultipartBody:
    """Multipart form payload.

    Fields keep insertion order. A field value is either a plain value
    (``str``, ``bytes`` or ``int``) or a file tuple
    ``(filename, content)`` / ``(filename, content, content_type)``.

    Example::

        form = MultipartBody()
        form.set("title", "report")
        form.add_file("document", b"%PDF-...", filename="report.pdf")
    """
    kind: ClassVar[BodyKind] = BodyKind.MULTIPART

    fields: List[Tuple[str, Any]] = field(default_factory=list)

    def append(self, name: str, value: Any) -> MultipartBody:
        self.fields.append((name, value))
        return self

    def set(self, name: str, value: Any) -> MultipartBody:
        """Replace every field called ``name`` with a single value."""
        self.fields = [(k, v) for k, v in self.fields if k != name]
        self.fields.append((name, value))
        return self

    def get(self, name: str) -> Any:
        for key, value in self.fields:
            if key == name:
                return value
        return None

    def add_file(
        self,
        name: str,
        content: Union[bytes, str],
        filename: str,
        content_type: Optional[str] = None,
    ) -> MultipartBody:
        if content_type is None:
            return self.append(name, (filename, content))
        return self.append(name, (filename, content, content_type))

    def encode(self, boundary: Optional[str] = None) -> Tuple[bytes, str]:
        """Encode the form, returning ``(body, content_type)``."""
        return encode_multipart_formdata(self.fields, boundary=boundary)


RequestBody = Union[JsonBody, MultipartBody]


def as_request_body(value: Any) -> Optional[RequestBody]:
    """Wrap a caller-supplied body in its payload kind.

    ``None`` means no body; plain values become :class:`JsonBody`.
    """
    if value is None:
        return None
    if isinstance(value, (JsonBody, MultipartBody)):
        return value
    return JsonBody(value)


@dataclass
class TransportRequest:
    """Outbound request handed to a transport."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[RequestBody] = None

    @property
    def kind(self) -> BodyKind:
        return self.body.kind if self.body is not None else BodyKind.JSON


class BaseTransport(ABC):
    """Abstract base for request-execution strategies."""

    @abstractmethod
    async def send(
        self,
        request: TransportRequest,
        progress: Optional[ProgressCallback] = None,
    ) -> Any:
        """Send a request and return the parsed response.

        Raises:
            TransportError: On network failure, unparseable body or
                non-success status.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release transport resources."""
        ...
