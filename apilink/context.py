"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Ambient API scope.

``ApiProvider`` installs a client for the duration of a ``with`` block so
code further down the call stack can reach it through ``use_api()``
without threading the client through every signature. Scopes nest and are
task-local.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import Any, List, Mapping, Optional

from apilink.client import ApiClient
from apilink.config.settings import ApiConfig
from apilink.exceptions import ConfigurationError
from apilink.logging_config import get_logger

logger = get_logger(__name__)

_current_api: ContextVar[Optional[ApiClient]] = ContextVar("apilink_current_api", default=None)


class ApiProvider:
    """Scope that makes an :class:`ApiClient` available to ``use_api()``.

    Usage::

        async with ApiProvider(base_url="https://api.example.com"):
            items = await use_api().get(ItemList, "/items")

    Only ``async with`` closes a client the provider created. A plain
    ``with`` block leaves it open; close it with ``await provider.client.close()``
    or pass in a client whose lifetime you manage.

    Args:
        config: Configuration for a client created by the provider.
        client: Existing client to expose instead of creating one.
        base_url: Shortcut override applied to ``config``.
        headers: Shortcut override applied to ``config``.
        include_credentials: Shortcut override applied to ``config``.
    """

    def __init__(
        self,
        config: Optional[ApiConfig] = None,
        *,
        client: Optional[ApiClient] = None,
        base_url: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        include_credentials: Optional[bool] = None,
        **client_kwargs: Any,
    ) -> None:
        overrides = (config, base_url, headers, include_credentials)
        if client is not None and (any(o is not None for o in overrides) or client_kwargs):
            raise ConfigurationError("ApiProvider accepts either a client or a configuration, not both")
        self._owns_client = client is None
        self._client = client or ApiClient(
            config,
            base_url=base_url,
            headers=headers,
            include_credentials=include_credentials,
            **client_kwargs,
        )
        self._tokens: List[Token] = []

    @property
    def client(self) -> ApiClient:
        return self._client

    def __enter__(self) -> ApiClient:
        self._tokens.append(_current_api.set(self._client))
        logger.debug("API scope entered")
        return self._client

    def __exit__(self, *exc_info: Any) -> None:
        _current_api.reset(self._tokens.pop())
        logger.debug("API scope exited")

    async def __aenter__(self) -> ApiClient:
        return self.__enter__()

    async def __aexit__(self, *exc_info: Any) -> None:
        self.__exit__(*exc_info)
        if self._owns_client:
            await self._client.close()


def use_api() -> ApiClient:
    """Return the client of the innermost active :class:`ApiProvider`.

    Raises:
        ConfigurationError: If called outside any provider scope.
    """
    api = _current_api.get()
    if api is None:
        raise ConfigurationError("API context is not set; did you forget ApiProvider?")
    return api
