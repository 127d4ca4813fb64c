"""
Tests for NodeTransport: the async /nxt request layer.

All HTTP calls go through httpx.MockTransport; no network access.
Covers: query-string parameters for GET and POST, empty POST body,
User-Agent header, parameter encoding, error mapping to TransportError.
"""

import httpx
import pytest

from jupiter_vault.core.errors import TransportError
from jupiter_vault.ledger.transport import (
    NODE_API_PATH,
    USER_AGENT,
    NodeTransport,
    RequestDescriptor,
    Verb,
    encode_params,
    redact_params,
)

from conftest import SERVER


def _transport(handler) -> NodeTransport:
    client = httpx.AsyncClient(base_url=SERVER, transport=httpx.MockTransport(handler))
    return NodeTransport(SERVER, client=client)


class TestEncodeParams:
    def test_booleans_lowercase(self):
        assert encode_params({"withMessage": True, "flag": False}) == {
            "withMessage": "true",
            "flag": "false",
        }

    def test_none_dropped(self):
        assert encode_params({"recipientPublicKey": None, "a": 1}) == {"a": "1"}

    def test_empty(self):
        assert encode_params(None) == {}

    def test_redact_hides_secrets(self):
        redacted = redact_params({"secretPhrase": "pw", "account": "JUP-1"})
        assert redacted == {"secretPhrase": "***", "account": "JUP-1"}


class TestRequestDescriptor:
    def test_query_params_include_request_type(self):
        descriptor = RequestDescriptor(Verb.GET, "getBalance", {"account": "JUP-1"})
        assert descriptor.query_params() == {
            "requestType": "getBalance",
            "account": "JUP-1",
        }

    def test_default_path(self):
        assert RequestDescriptor(Verb.GET, "getBalance").path == NODE_API_PATH


class TestNodeTransport:
    @pytest.mark.asyncio
    async def test_get_sends_query_params(self, node):
        node.on("getBalance", {"balanceNQT": "5"})
        async with node.transport() as transport:
            data = await transport.send(
                RequestDescriptor(Verb.GET, "getBalance", {"account": "JUP-1"})
            )
        assert data == {"balanceNQT": "5"}
        call = node.requests[0]
        assert call["method"] == "GET"
        assert call["path"] == "/nxt"
        assert call["params"] == {"requestType": "getBalance", "account": "JUP-1"}

    @pytest.mark.asyncio
    async def test_post_uses_query_string_not_body(self, node):
        node.on("sendMessage", {"signatureHash": "abc"})
        async with node.transport() as transport:
            await transport.send(RequestDescriptor(
                Verb.POST,
                "sendMessage",
                {"recipient": "JUP-1", "compressMessageToEncrypt": True},
            ))
        call = node.requests[0]
        assert call["method"] == "POST"
        assert call["body"] == b""
        assert call["params"]["recipient"] == "JUP-1"
        assert call["params"]["compressMessageToEncrypt"] == "true"

    @pytest.mark.asyncio
    async def test_user_agent_header(self, node):
        node.on("getBalance", {"balanceNQT": "0"})
        async with node.transport() as transport:
            await transport.request(Verb.GET, "/nxt", {"requestType": "getBalance"})
        assert node.requests[0]["headers"]["user-agent"] == USER_AGENT

    @pytest.mark.asyncio
    async def test_verb_accepts_string(self, node):
        node.on("getBalance", {"balanceNQT": "0"})
        async with node.transport() as transport:
            await transport.request("post", "/nxt", {"requestType": "getBalance"})
        assert node.requests[0]["method"] == "POST"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        transport = _transport(lambda request: httpx.Response(503, text="busy"))
        with pytest.raises(TransportError) as exc_info:
            await transport.request(Verb.GET, "/nxt", {"requestType": "getBalance"})
        err = exc_info.value
        assert err.verb == "get"
        assert err.path == "/nxt"
        assert isinstance(err.cause, httpx.HTTPStatusError)
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = _transport(handler)
        with pytest.raises(TransportError) as exc_info:
            await transport.request(Verb.POST, "/nxt", {"requestType": "sendMoney"})
        assert exc_info.value.verb == "post"
        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        transport = _transport(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(TransportError):
            await transport.request(Verb.GET, "/nxt")
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_non_object_json(self):
        transport = _transport(lambda request: httpx.Response(200, json=[1, 2]))
        with pytest.raises(TransportError, match="JSON object"):
            await transport.request(Verb.GET, "/nxt")
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(500)

        transport = _transport(handler)
        with pytest.raises(TransportError):
            await transport.request(Verb.POST, "/nxt", {"requestType": "sendMoney"})
        assert len(attempts) == 1
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_default_client_configuration(self):
        transport = NodeTransport(SERVER + "/", timeout=5.0)
        assert transport.base_url == SERVER
        assert transport._client.headers["User-Agent"] == USER_AGENT
        assert transport._client.timeout.read == 5.0
        await transport.aclose()
