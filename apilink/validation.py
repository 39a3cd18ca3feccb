"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Structural validation of parsed responses.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from apilink.exceptions import ValidationError
from apilink.logging_config import get_logger

logger = get_logger(__name__)

# Building a TypeAdapter walks the whole schema; reuse them per schema object.
_ADAPTER_CACHE: Dict[Any, TypeAdapter] = {}
_ADAPTER_CACHE_SIZE = 256


def _adapter_for(schema: Any) -> TypeAdapter:
    if isinstance(schema, TypeAdapter):
        return schema
    try:
        cached = _ADAPTER_CACHE.get(schema)
    except TypeError:
        # Unhashable schema annotation
        return TypeAdapter(schema)
    if cached is None:
        cached = TypeAdapter(schema)
        if len(_ADAPTER_CACHE) >= _ADAPTER_CACHE_SIZE:
            _ADAPTER_CACHE.clear()
        _ADAPTER_CACHE[schema] = cached
    return cached


class SchemaValidator:
    """Validates parsed JSON against a pydantic-compatible schema.

    Any type pydantic understands works as a schema: ``BaseModel``
    subclasses, ``TypedDict`` classes, builtin generics such as
    ``list[int]``, ``type(None)`` for empty responses, or a ready-made
    ``TypeAdapter``.
    """

    def __init__(self, schema: Any) -> None:
        self.schema = schema
        self._adapter = _adapter_for(schema)

    def validate(self, value: Any) -> Any:
        """Return the validated (and coerced) value.

        Raises:
            ValidationError: If ``value`` does not match the schema.
        """
        try:
            return self._adapter.validate_python(value)
        except PydanticValidationError as exc:
            logger.debug(f"Response failed validation: {exc.error_count()} error(s)")
            raise ValidationError(
                f"Response does not match schema: {exc.error_count()} validation error(s)",
                errors=exc.errors(),
            ) from exc
