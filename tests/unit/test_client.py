"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Tests for ApiClient and ApiClientBuilder.
"""

import json
import logging

import pytest
import structlog
from typing_extensions import TypedDict

from apilink.client import ApiClient, ApiClientBuilder
from apilink.config.settings import ApiConfig
from apilink.exceptions import ConfigurationError, TransportError
from apilink.logging_config import get_logger
from apilink.transports.base import BodyKind, MultipartBody
from apilink.transports.mock import MockTransport
from apilink.transports.simple import SimpleBodyTransport
from apilink.transports.streaming import StreamingUploadTransport


class Payload(TypedDict):
    test: str


class TestClientInit:
    def test_defaults(self):
        client = ApiClient()
        assert client.config.base_url == ""
        assert client.headers == {}
        assert isinstance(client.dispatcher.transport_for(BodyKind.JSON), SimpleBodyTransport)
        assert isinstance(client.dispatcher.transport_for(BodyKind.MULTIPART), StreamingUploadTransport)

    def test_headers_snapshot(self, api_client):
        assert api_client.headers == {"key": "val"}
        api_client.headers["other"] = "x"
        assert api_client.headers == {"key": "val"}

    def test_overrides_apply_on_top_of_config(self):
        config = ApiConfig(base_url="http://a", headers={"x": "1"}, timeout=5)
        client = ApiClient(config, base_url="http://b", headers={"y": "2"}, include_credentials=True)
        assert client.config.base_url == "http://b"
        assert client.headers == {"y": "2"}
        assert client.config.include_credentials is True
        assert client.config.timeout == 5

    def test_from_config_file(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("api:\n  base_url: http://files.test\n  headers:\n    X-Key: abc\n")
        client = ApiClient.from_config_file(str(path))
        assert client.config.base_url == "http://files.test"
        assert client.headers == {"X-Key": "abc"}


class TestHeaders:
    def test_set_header_is_case_insensitive(self, api_client):
        api_client.set_header("KEY", "other")
        assert api_client.headers == {"KEY": "other"}

    def test_clear_header(self, api_client):
        api_client.clear_header("Key")
        assert api_client.headers == {}

    @pytest.mark.asyncio
    async def test_header_changes_affect_later_calls_only(self, handler, api_client):
        handler.queue_json({"test": "a"}).queue_json({"test": "b"})
        first = api_client.get(Payload, "/items")
        api_client.clear_header("key")
        api_client.set_header("X-New", "1")
        second = api_client.get(Payload, "/items")
        await first
        await second

        first_sent, second_sent = handler.requests
        assert first_sent.headers["key"] == "val"
        assert "x-new" not in first_sent.headers
        assert "key" not in second_sent.headers
        assert second_sent.headers["x-new"] == "1"


class TestVerbs:
    @pytest.mark.asyncio
    async def test_get(self, handler, api_client):
        handler.queue_json({"test": "test"})
        assert await api_client.get(Payload, "/items/1") == {"test": "test"}
        sent = handler.last_request
        assert sent.method == "GET"
        assert str(sent.url) == "http://example.com/items/1"
        assert sent.headers["key"] == "val"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("verb", ["post", "put", "patch"])
    async def test_json_body_verbs(self, handler, api_client, verb):
        handler.queue_json({"test": "test"})
        result = await getattr(api_client, verb)(Payload, "/items", {"test": "test"})
        assert result == {"test": "test"}
        sent = handler.last_request
        assert sent.method == verb.upper()
        assert sent.headers["content-type"] == "application/json"
        assert json.loads(sent.content) == {"test": "test"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("verb", ["post", "put", "patch"])
    async def test_multipart_body_verbs(self, handler, api_client, verb):
        seen = []
        handler.queue_json({"test": "test"})
        form = MultipartBody().set("key", "val")
        result = await getattr(api_client, verb)(Payload, "/upload", form, seen.append)
        assert result == {"test": "test"}
        assert handler.last_request.headers["content-type"].startswith("multipart/form-data")
        assert seen[-1] == 100

    @pytest.mark.asyncio
    async def test_post_without_body(self, handler, api_client):
        handler.queue_json({"test": "test"})
        await api_client.post(Payload, "/ping")
        assert handler.last_request.content == b""

    @pytest.mark.asyncio
    async def test_delete_skips_validation(self, handler, api_client):
        handler.queue_json({"anything": 1})
        assert await api_client.delete("/items/1") == {"anything": 1}
        assert handler.last_request.method == "DELETE"

    @pytest.mark.asyncio
    async def test_error_is_surfaced(self, handler, api_client):
        handler.queue_json({"detail": "Forbidden"}, status_code=403)
        with pytest.raises(TransportError, match="Forbidden"):
            await api_client.get(Payload, "/secret")


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_close_closes_transports(self):
        simple, streaming = MockTransport({("GET", "/x"): 1}), MockTransport()
        client = ApiClient(simple_transport=simple, streaming_transport=streaming)
        await client.get(None, "/x")
        await client.close()
        assert simple.sent_requests == []

    @pytest.mark.asyncio
    async def test_async_context_manager(self):
        simple = MockTransport({("GET", "/x"): 1})
        async with ApiClient(simple_transport=simple, streaming_transport=MockTransport()) as client:
            assert await client.get(None, "/x") == 1
        assert simple.sent_requests == []

    @pytest.mark.asyncio
    async def test_close_without_requests(self):
        await ApiClient().close()


class TestBuilder:
    @pytest.mark.asyncio
    async def test_build_with_hooks_and_transports(self):
        simple = MockTransport({("GET", "http://api.test/items"): [1, 2]})
        calls = []
        client = (
            ApiClientBuilder()
            .set_base_url("http://api.test")
            .set_header("Authorization", "Bearer tok")
            .set_transport(simple=simple, streaming=MockTransport())
            .on_before_request(lambda request: calls.append("before") or request)
            .on_after_response(lambda request, value: calls.append(("after", value)))
            .build()
        )
        assert await client.get(None, "/items") == [1, 2]
        assert simple.sent_requests[0].headers == {"Authorization": "Bearer tok"}
        assert calls == ["before", ("after", [1, 2])]

    def test_builder_settings(self):
        client = (
            ApiClientBuilder()
            .set_include_credentials()
            .set_timeout(5)
            .set_header("a", "1")
            .set_header("A", "2")
            .build()
        )
        assert client.config.include_credentials is True
        assert client.config.timeout == 5
        assert client.headers == {"A": "2"}

    def test_invalid_timeout(self):
        with pytest.raises(ConfigurationError):
            ApiClientBuilder().set_timeout(0).build()


class TestConfigHeaderCasing:
    @pytest.mark.asyncio
    async def test_both_transports_send_last_spelling(self, handler, simple_transport, streaming_transport):
        client = ApiClient(
            ApiConfig(base_url="http://example.com", headers={"X-Token": "old", "x-token": "new"}),
            simple_transport=simple_transport,
            streaming_transport=streaming_transport,
        )
        handler.queue_json({}).queue_json({})

        await client.get(None, "/items")
        await client.post(None, "/upload", MultipartBody().set("key", "val"))

        json_request, upload_request = handler.requests
        assert json_request.headers.get_list("x-token") == ["new"]
        assert upload_request.headers.get_list("x-token") == ["new"]


class TestConfigFileLogging:
    def test_from_config_file_applies_logging_section(self, temp_dir):
        log_file = temp_dir / "logs" / "apilink.log"
        path = temp_dir / "config.yaml"
        path.write_text(
            "api:\n"
            "  base_url: http://files.test\n"
            "logging:\n"
            "  level: DEBUG\n"
            f"  file: {log_file}\n"
            "  json_format: true\n"
        )

        ApiClient.from_config_file(str(path))
        get_logger("test").debug("configured_from_file", source="yaml")

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert any(
            isinstance(h, logging.FileHandler) and h.baseFilename == str(log_file)
            for h in root_logger.handlers
        )
        entries = [json.loads(line) for line in log_file.read_text().splitlines() if line]
        assert any(entry["event"] == "configured_from_file" for entry in entries)

    def teardown_method(self):
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()
