"""
JSON-RPC 2.0 envelopes and the chain daemon result shapes.

Result models accept unknown fields: the daemon returns far more than
issuance needs, and new daemon releases add fields freely.
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from fil_spid.types import PascalModel


class _ResultModel(PascalModel):
    """Lenient, immutable view of a daemon result."""

    model_config = PascalModel.model_config | ConfigDict(extra="ignore", frozen=True)


class RpcRequest(PascalModel):
    """A single JSON-RPC 2.0 request."""

    model_config = PascalModel.model_config | ConfigDict(alias_generator=None, frozen=True)

    jsonrpc: str = "2.0"
    id: int = 1
    method: str
    params: list[Any] = Field(default_factory=list)


class RpcErrorObject(_ResultModel):
    """The `error` member of a failed JSON-RPC response."""

    model_config = _ResultModel.model_config | ConfigDict(alias_generator=None)

    code: int | None = None
    message: str = ""


class RpcResponse(_ResultModel):
    """A JSON-RPC 2.0 response envelope."""

    model_config = _ResultModel.model_config | ConfigDict(alias_generator=None)

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: Any = None
    error: RpcErrorObject | None = None


class TipSetKey(_ResultModel):
    """
    Identity of a tipset: the CIDs of its blocks.

    Handed back verbatim to lookups that take a tipset; never inspected.
    """

    cids: list[dict[str, str]]
    height: int | None = None


class MinerInfo(_ResultModel):
    """The subset of a storage provider's miner info used for issuance."""

    owner: str | None = None
    worker: str
    """Address of the key currently authorized to sign for the provider."""


class BeaconEntryResult(_ResultModel):
    """A randomness beacon entry as recorded on chain."""

    round: int | None = None
    data: str
    """Base64 encoding of the entry bytes."""


class SignatureResult(_ResultModel):
    """A signature produced by the daemon wallet."""

    type: int | None = None
    """Signature scheme (1 = secp256k1, 2 = BLS)."""

    data: str
    """Base64 encoding of the signature bytes."""
