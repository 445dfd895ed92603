"""
Chain RPC client.

Issuance talks to the chain daemon through exactly four operations:

- tipset lookup by height
- miner info lookup against a tipset
- beacon entry lookup by epoch
- signing with a wallet key

`ChainRpc` is that surface as a protocol, so the issuance pipeline can be
driven by an in-memory fake. `LotusClient` is the production
implementation: JSON-RPC 2.0 over HTTP POST with a bounded per-call timeout.

Error mapping:

- Transport failures, timeouts and bare 5xx responses raise `ChainUnavailable`
- Any response carrying an `error` member raises `ChainRPCError`, whatever its HTTP status
- An empty or unparseable response raises `ChainRPCError`
- A `null` result is returned as `None` for the caller to interpret
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from fil_spid import metrics
from fil_spid.types import ChainRPCError, ChainUnavailable

from .api_info import ApiInfo
from .models import (
    BeaconEntryResult,
    MinerInfo,
    RpcErrorObject,
    RpcRequest,
    RpcResponse,
    SignatureResult,
    TipSetKey,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
"""Per-call timeout in seconds. A slow daemon fails the issuance rather than stalling it."""

METHOD_TIPSET_BY_HEIGHT = "Filecoin.ChainGetTipSetByHeight"
METHOD_MINER_INFO = "Filecoin.StateMinerInfo"
METHOD_BEACON_ENTRY = "Filecoin.BeaconGetEntry"
METHOD_WALLET_SIGN = "Filecoin.WalletSign"


@runtime_checkable
class ChainRpc(Protocol):
    """
    The chain operations issuance depends on.

    Implementations raise `ChainUnavailable` for transport failures and
    `ChainRPCError` for errors reported by the daemon. A missing result is
    returned as `None`.
    """

    async def chain_get_tipset_by_height(self, height: int) -> TipSetKey | None:
        """Return the tipset at `height`, or None if the daemon has none."""
        ...

    async def state_miner_info(self, provider_id: str, tipset: TipSetKey) -> MinerInfo | None:
        """Return miner info for `provider_id` as of `tipset`."""
        ...

    async def beacon_get_entry(self, epoch: int) -> BeaconEntryResult | None:
        """Return the beacon entry recorded for `epoch`."""
        ...

    async def wallet_sign(self, key: str, message: bytes) -> SignatureResult | None:
        """Sign `message` with the wallet key `key`."""
        ...


class LotusClient:
    """
    JSON-RPC client for a Lotus-compatible chain daemon.

    One `httpx.AsyncClient` is shared by all calls made through an
    instance; it is safe to use from concurrent issuances.

    Usage::

        async with LotusClient(ApiInfo.discover()) as rpc:
            tipset = await rpc.chain_get_tipset_by_height(1_000_000)
    """

    def __init__(
        self,
        api_info: ApiInfo,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Create a client bound to one daemon endpoint.

        Args:
            api_info: Resolved endpoint and token.
            timeout: Per-call timeout in seconds.
            transport: Optional httpx transport (tests inject a mock one).
        """
        self.api_info = api_info
        self._client = httpx.AsyncClient(
            headers=api_info.headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> LotusClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def call(self, method: str, params: list[Any]) -> Any:
        """
        Perform one JSON-RPC call and return its `result`.

        Raises:
            ChainUnavailable: On timeouts and transport failures.
            ChainRPCError: On HTTP errors, empty responses, or a reported error.
        """
        request = RpcRequest(method=method, params=params)
        url = self.api_info.rpc_url

        logger.debug("Calling %s against %s", method, url)
        metrics.rpc_calls_total.labels(method=method).inc()

        try:
            response = await self._client.post(url, json=request.model_dump(mode="json"))
        except httpx.TimeoutException as exc:
            raise ChainUnavailable(f"Timed out calling {method} against {url}") from exc
        except httpx.TransportError as exc:
            raise ChainUnavailable(f"Network error calling {method} against {url}: {exc}") from exc

        if response.status_code >= 500:
            # Lotus answers bad methods and params with HTTP 500 and a JSON-RPC error body.
            reported = _reported_error(response.content)
            if reported is not None:
                raise ChainRPCError(method, reported.message, code=reported.code)
            raise ChainUnavailable(
                f"HTTP error {response.status_code} calling {method} against {url}"
            )
        if response.is_error:
            raise ChainRPCError(
                method, f"HTTP error {response.status_code}: {response.text[:200]}"
            )

        if not response.content:
            raise ChainRPCError(method, "no result from API call")

        try:
            envelope = RpcResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise ChainRPCError(method, f"malformed JSON-RPC response: {exc}") from exc

        if envelope.error is not None:
            raise ChainRPCError(method, envelope.error.message, code=envelope.error.code)

        # An explicit null is a valid answer; an absent member is not.
        if "result" not in envelope.model_fields_set:
            raise ChainRPCError(method, "no result from API call")

        return envelope.result

    async def chain_get_tipset_by_height(self, height: int) -> TipSetKey | None:
        # The null second parameter asks for the lookup from the current head.
        result = await self.call(METHOD_TIPSET_BY_HEIGHT, [height, None])
        return _parse(METHOD_TIPSET_BY_HEIGHT, TipSetKey, result)

    async def state_miner_info(self, provider_id: str, tipset: TipSetKey) -> MinerInfo | None:
        result = await self.call(METHOD_MINER_INFO, [provider_id, tipset.cids])
        return _parse(METHOD_MINER_INFO, MinerInfo, result)

    async def beacon_get_entry(self, epoch: int) -> BeaconEntryResult | None:
        result = await self.call(METHOD_BEACON_ENTRY, [epoch])
        return _parse(METHOD_BEACON_ENTRY, BeaconEntryResult, result)

    async def wallet_sign(self, key: str, message: bytes) -> SignatureResult | None:
        encoded = base64.b64encode(message).decode("ascii")
        result = await self.call(METHOD_WALLET_SIGN, [key, encoded])
        return _parse(METHOD_WALLET_SIGN, SignatureResult, result)


def _parse(method: str, model: type[Any], result: Any) -> Any:
    """Validate a non-null result against `model`."""
    if result is None:
        return None
    try:
        return model.model_validate(result)
    except ValidationError as exc:
        raise ChainRPCError(method, f"unexpected result shape: {exc}") from exc


def _reported_error(content: bytes) -> RpcErrorObject | None:
    """The JSON-RPC error carried by an HTTP error body, if there is one."""
    if not content:
        return None
    try:
        return RpcResponse.model_validate_json(content).error
    except ValidationError:
        return None
