"""
Tests for the JSON-RPC chain client.

Requests are served by httpx.MockTransport, so no daemon is needed.
"""

from __future__ import annotations

import base64
import json
from typing import Any, Callable

import httpx
import pytest

from fil_spid.rpc import ApiInfo, ChainRpc, LotusClient, TipSetKey
from fil_spid.types import ChainRPCError, ChainUnavailable

from tests.fil_spid.helpers import FakeChainRpc

API_INFO = ApiInfo.from_api_info_string("testtoken:/ip4/127.0.0.1/tcp/1234/http")


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> LotusClient:
    return LotusClient(API_INFO, transport=httpx.MockTransport(handler))


def _result(result: Any) -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering every call with `result`, recording requests."""

    def handler(request: httpx.Request) -> httpx.Response:
        handler.requests.append(request)  # type: ignore[attr-defined]
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})

    handler.requests = []  # type: ignore[attr-defined]
    return handler


class TestProtocol:
    """Both implementations satisfy the ChainRpc protocol."""

    def test_lotus_client_is_chain_rpc(self) -> None:
        """LotusClient provides the four operations."""
        assert isinstance(_client(_result(None)), ChainRpc)

    def test_fake_is_chain_rpc(self) -> None:
        """The in-memory fake provides the four operations."""
        assert isinstance(FakeChainRpc(), ChainRpc)


class TestRequests:
    """Wire format of outgoing requests."""

    @pytest.mark.asyncio
    async def test_tipset_by_height_request(self) -> None:
        """Tipset lookup posts the height and a null tipset key with the bearer token."""
        handler = _result({"Cids": [{"/": "bafyA"}], "Height": 999_100, "Blocks": []})
        async with _client(handler) as rpc:
            tipset = await rpc.chain_get_tipset_by_height(999_100)

        (request,) = handler.requests  # type: ignore[attr-defined]
        assert request.url == "http://127.0.0.1:1234/rpc/v0"
        assert request.method == "POST"
        assert request.headers["Authorization"] == "Bearer testtoken"
        assert json.loads(request.content) == {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "Filecoin.ChainGetTipSetByHeight",
            "params": [999_100, None],
        }
        assert tipset == TipSetKey(cids=[{"/": "bafyA"}], height=999_100)

    @pytest.mark.asyncio
    async def test_miner_info_passes_tipset_cids(self) -> None:
        """Miner info lookup passes the tipset CIDs verbatim."""
        handler = _result({"Owner": "f0100", "Worker": "f3worker", "SectorSize": 34359738368})
        tipset = TipSetKey(cids=[{"/": "bafyA"}, {"/": "bafyB"}])
        async with _client(handler) as rpc:
            info = await rpc.state_miner_info("f01000", tipset)

        (request,) = handler.requests  # type: ignore[attr-defined]
        body = json.loads(request.content)
        assert body["method"] == "Filecoin.StateMinerInfo"
        assert body["params"] == ["f01000", [{"/": "bafyA"}, {"/": "bafyB"}]]
        assert info is not None
        assert info.worker == "f3worker"

    @pytest.mark.asyncio
    async def test_beacon_entry_request(self) -> None:
        """Beacon lookup passes the epoch."""
        data = base64.b64encode(bytes(96)).decode()
        handler = _result({"Round": 12345, "Data": data})
        async with _client(handler) as rpc:
            entry = await rpc.beacon_get_entry(1_000_000)

        (request,) = handler.requests  # type: ignore[attr-defined]
        body = json.loads(request.content)
        assert body["method"] == "Filecoin.BeaconGetEntry"
        assert body["params"] == [1_000_000]
        assert entry is not None
        assert entry.data == data

    @pytest.mark.asyncio
    async def test_wallet_sign_sends_base64_message(self) -> None:
        """Signing sends the message base64-encoded."""
        handler = _result({"Type": 2, "Data": base64.b64encode(b"sig").decode()})
        async with _client(handler) as rpc:
            result = await rpc.wallet_sign("f3worker", b"   message")

        (request,) = handler.requests  # type: ignore[attr-defined]
        body = json.loads(request.content)
        assert body["method"] == "Filecoin.WalletSign"
        assert body["params"] == ["f3worker", base64.b64encode(b"   message").decode()]
        assert result is not None
        assert result.type == 2

    @pytest.mark.asyncio
    async def test_no_token_no_auth_header(self) -> None:
        """A token-less endpoint sends no Authorization header."""
        handler = _result(None)
        info = ApiInfo.from_multiaddr("/ip4/127.0.0.1/tcp/1234/http")
        async with LotusClient(info, transport=httpx.MockTransport(handler)) as rpc:
            await rpc.beacon_get_entry(1)

        (request,) = handler.requests  # type: ignore[attr-defined]
        assert "Authorization" not in request.headers


class TestResponses:
    """Mapping of daemon responses to results and errors."""

    @pytest.mark.asyncio
    async def test_null_result_is_none(self) -> None:
        """A null result is returned as None."""
        async with _client(_result(None)) as rpc:
            assert await rpc.chain_get_tipset_by_height(5) is None

    @pytest.mark.asyncio
    async def test_error_field_raises_rpc_error(self) -> None:
        """A response with an error member raises ChainRPCError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": 1,
                    "error": {"code": 1, "message": "actor not found"},
                },
            )

        async with _client(handler) as rpc:
            with pytest.raises(ChainRPCError) as exc_info:
                await rpc.state_miner_info("f01000", TipSetKey(cids=[{"/": "x"}]))

        assert exc_info.value.code == 1
        assert exc_info.value.method == "Filecoin.StateMinerInfo"
        assert "actor not found" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_empty_body_raises_rpc_error(self) -> None:
        """An empty response body is a failure, not an empty result."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"")

        async with _client(handler) as rpc:
            with pytest.raises(ChainRPCError, match="no result from API call"):
                await rpc.beacon_get_entry(1)

    @pytest.mark.asyncio
    async def test_non_json_body_raises_rpc_error(self) -> None:
        """A body that is not a JSON-RPC envelope is a failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>proxy error</html>")

        async with _client(handler) as rpc:
            with pytest.raises(ChainRPCError, match="malformed"):
                await rpc.beacon_get_entry(1)

    @pytest.mark.asyncio
    async def test_unexpected_result_shape(self) -> None:
        """A result missing required fields is a failure."""
        async with _client(_result({"Owner": "f0100"})) as rpc:
            with pytest.raises(ChainRPCError, match="unexpected result shape"):
                await rpc.state_miner_info("f01000", TipSetKey(cids=[{"/": "x"}]))

    @pytest.mark.asyncio
    async def test_unauthorized_is_rpc_error(self) -> None:
        """A rejected token is an application-level failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, text="invalid token")

        async with _client(handler) as rpc:
            with pytest.raises(ChainRPCError, match="HTTP error 401"):
                await rpc.beacon_get_entry(1)

    @pytest.mark.asyncio
    async def test_server_error_is_unavailable(self) -> None:
        """A 5xx response means the daemon is unavailable."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        async with _client(handler) as rpc:
            with pytest.raises(ChainUnavailable, match="HTTP error 503"):
                await rpc.beacon_get_entry(1)

    @pytest.mark.asyncio
    async def test_server_error_with_reported_error_is_rpc_error(self) -> None:
        """A 500 carrying a JSON-RPC error is the daemon rejecting the call."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                500,
                json={
                    "jsonrpc": "2.0",
                    "id": 1,
                    "error": {"code": -32601, "message": "method not found"},
                },
            )

        async with _client(handler) as rpc:
            with pytest.raises(ChainRPCError) as exc_info:
                await rpc.beacon_get_entry(1)

        assert exc_info.value.code == -32601
        assert "not found" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_server_error_with_unrelated_body_is_unavailable(self) -> None:
        """A 5xx whose body is not a JSON-RPC error stays ChainUnavailable."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        async with _client(handler) as rpc:
            with pytest.raises(ChainUnavailable, match="HTTP error 502"):
                await rpc.beacon_get_entry(1)

    @pytest.mark.asyncio
    async def test_timeout_is_unavailable(self) -> None:
        """A timeout raises ChainUnavailable."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with _client(handler) as rpc:
            with pytest.raises(ChainUnavailable, match="Timed out calling Filecoin.BeaconGetEntry"):
                await rpc.beacon_get_entry(1)

    @pytest.mark.asyncio
    async def test_connection_refused_is_unavailable(self) -> None:
        """A transport failure raises ChainUnavailable."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as rpc:
            with pytest.raises(ChainUnavailable, match="Network error"):
                await rpc.chain_get_tipset_by_height(1)

    @pytest.mark.asyncio
    async def test_missing_result_member(self) -> None:
        """An envelope with neither result nor error is a failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1})

        async with _client(handler) as rpc:
            with pytest.raises(ChainRPCError, match="no result from API call"):
                await rpc.beacon_get_entry(1)
