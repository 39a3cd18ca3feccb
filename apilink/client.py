"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

apilink Client & Builder.

Provides two entry points to initialize a client:
    - ``ApiClient(base_url=..., headers=...)`` - quick start with sensible defaults
    - ``ApiClientBuilder().set_base_url(...).set_header(...).build()`` - advanced config
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx

from apilink.config.settings import ApiConfig, load_config
from apilink.dispatcher import RequestDispatcher
from apilink.exceptions import ConfigurationError
from apilink.hooks import BeforeRequestCallback, HookRegistry
from apilink.logging_config import get_logger, setup_logging
from apilink.progress import ProgressCallback, ProgressRelay
from apilink.transports.base import BaseTransport
from apilink.transports.simple import SimpleBodyTransport
from apilink.transports.streaming import StreamingUploadTransport

logger = get_logger(__name__)


class ApiClient:
    """HTTP client exposing the five request verbs.

    Quick start::

        client = ApiClient(base_url="https://api.example.com")
        user = await client.get(User, "/users/42")

    Uploads with progress::

        form = MultipartBody().add_file("file", data, filename="a.csv")
        await client.post(Upload, "/uploads", form).progress(print)

    Every verb returns a :class:`ProgressRelay`. Requests use the header set
    current at the time of the call.

    Args:
        config: Base configuration; keyword overrides are applied on top.
        base_url: Prefix for every request path.
        headers: Initial header set.
        include_credentials: Send cookies and ``auth`` on JSON requests.
        auth: httpx credentials for the default transports.
        simple_transport: Custom transport for JSON requests.
        streaming_transport: Custom transport for multipart uploads.
        hooks: Lifecycle hook registry.
    """

    def __init__(
        self,
        config: Optional[ApiConfig] = None,
        *,
        base_url: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        include_credentials: Optional[bool] = None,
        auth: Optional[httpx.Auth] = None,
        simple_transport: Optional[BaseTransport] = None,
        streaming_transport: Optional[BaseTransport] = None,
        hooks: Optional[HookRegistry] = None,
    ) -> None:
        config = config or ApiConfig()
        overrides: Dict[str, Any] = {}
        if base_url is not None:
            overrides["base_url"] = base_url
        if include_credentials is not None:
            overrides["include_credentials"] = include_credentials
        if overrides:
            config = replace(config, **overrides)
        if headers is not None:
            config = replace(config, headers={})
            for name, value in headers.items():
                config = config.with_header(name, value)
        self._config = config

        self._simple = simple_transport or SimpleBodyTransport(
            include_credentials=config.include_credentials,
            auth=auth,
            timeout=config.timeout,
        )
        self._streaming = streaming_transport or StreamingUploadTransport(
            auth=auth,
            timeout=config.timeout,
            chunk_size=config.upload_chunk_size,
        )
        self._hooks = hooks or HookRegistry()
        self._dispatcher = RequestDispatcher(
            simple=self._simple,
            streaming=self._streaming,
            hooks=self._hooks,
        )
        logger.info(f"ApiClient initialized (base_url={config.base_url!r})")

    @classmethod
    def from_config_file(cls, config_path: Optional[str] = None, **kwargs: Any) -> ApiClient:
        """Build a client from a YAML configuration file.

        The file's ``logging`` section is applied through ``setup_logging``
        before the client is created.
        """
        config = load_config(config_path)
        setup_logging(
            level=config.logging.level,
            log_file=Path(config.logging.file) if config.logging.file else None,
            json_format=config.logging.json_format,
        )
        return cls(config, **kwargs)

    # -- Configuration -----------------------------------------------------

    @property
    def config(self) -> ApiConfig:
        return self._config

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._config.headers)

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    def set_header(self, name: str, value: str) -> None:
        """Set a header for subsequent requests."""
        self._config = self._config.with_header(name, value)
        logger.debug(f"Header set: {name}")

    def clear_header(self, name: str) -> None:
        """Remove a header from subsequent requests."""
        self._config = self._config.without_header(name)
        logger.debug(f"Header cleared: {name}")

    # -- Verbs ---------------------------------------------------------------

    def get(self, schema: Any, path: str) -> ProgressRelay:
        return self._dispatcher.dispatch(self._config, schema, "GET", path)

    def put(
        self,
        schema: Any,
        path: str,
        body: Any,
        progress: Optional[ProgressCallback] = None,
    ) -> ProgressRelay:
        return self._dispatcher.dispatch(self._config, schema, "PUT", path, body, progress)

    def post(
        self,
        schema: Any,
        path: str,
        body: Any = None,
        progress: Optional[ProgressCallback] = None,
    ) -> ProgressRelay:
        return self._dispatcher.dispatch(self._config, schema, "POST", path, body, progress)

    def patch(
        self,
        schema: Any,
        path: str,
        body: Any,
        progress: Optional[ProgressCallback] = None,
    ) -> ProgressRelay:
        return self._dispatcher.dispatch(self._config, schema, "PATCH", path, body, progress)

    def delete(self, path: str) -> ProgressRelay:
        """Delete a resource. The response is returned unvalidated."""
        return self._dispatcher.dispatch(self._config, None, "DELETE", path)

    # -- Lifecycle -----------------------------------------------------------

    async def close(self) -> None:
        """Release transport resources."""
        await self._simple.close()
        await self._streaming.close()
        logger.info("ApiClient closed")

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class ApiClientBuilder:
    """Fluent builder for advanced ApiClient configuration.

    Example::

        client = (
            ApiClientBuilder()
            .set_base_url("https://api.example.com")
            .set_header("Authorization", f"Bearer {token}")
            .set_include_credentials(True)
            .build()
        )
    """

    def __init__(self, config: Optional[ApiConfig] = None) -> None:
        self._config = config or ApiConfig()
        self._auth: Optional[httpx.Auth] = None
        self._simple: Optional[BaseTransport] = None
        self._streaming: Optional[BaseTransport] = None
        self._before_request: List[BeforeRequestCallback] = []
        self._after_response: List[Callable[..., None]] = []

    def set_base_url(self, url: str) -> ApiClientBuilder:
        self._config = replace(self._config, base_url=url)
        return self

    def set_header(self, name: str, value: str) -> ApiClientBuilder:
        self._config = self._config.with_header(name, value)
        return self

    def set_include_credentials(self, include: bool = True) -> ApiClientBuilder:
        self._config = replace(self._config, include_credentials=include)
        return self

    def set_timeout(self, seconds: float) -> ApiClientBuilder:
        self._config = replace(self._config, timeout=seconds)
        return self

    def set_auth(self, auth: httpx.Auth) -> ApiClientBuilder:
        self._auth = auth
        return self

    def set_transport(
        self,
        simple: Optional[BaseTransport] = None,
        streaming: Optional[BaseTransport] = None,
    ) -> ApiClientBuilder:
        """Override one or both default transports."""
        if simple is not None:
            self._simple = simple
        if streaming is not None:
            self._streaming = streaming
        return self

    def on_before_request(self, callback: BeforeRequestCallback) -> ApiClientBuilder:
        self._before_request.append(callback)
        return self

    def on_after_response(self, callback: Callable[..., None]) -> ApiClientBuilder:
        self._after_response.append(callback)
        return self

    def build(self) -> ApiClient:
        """Construct the ApiClient and register queued hooks.

        Raises:
            ConfigurationError: If the timeout is not positive.
        """
        if self._config.timeout <= 0:
            raise ConfigurationError(
                f"ApiClientBuilder.build() requires a positive timeout, got {self._config.timeout}"
            )

        hooks = HookRegistry()
        for cb in self._before_request:
            hooks.on_before_request(cb)
        for cb in self._after_response:
            hooks.on_after_response(cb)

        client = ApiClient(
            self._config,
            auth=self._auth,
            simple_transport=self._simple,
            streaming_transport=self._streaming,
            hooks=hooks,
        )
        logger.info(
            f"ApiClientBuilder: built client with {len(self._before_request)} request hook(s)"
        )
        return client
