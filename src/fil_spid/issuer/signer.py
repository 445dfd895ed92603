"""
Signer Adapter

Delegates signing to the daemon wallet. Key material never enters this
process: only a key identifier and the message cross the boundary.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass

from fil_spid.rpc import ChainRpc
from fil_spid.types import ChainRPCError, ProtocolViolation, SigningUnavailable

logger = logging.getLogger(__name__)

_KEY_MISSING = "not found"
"""Daemon error text for a key the wallet does not hold."""


@dataclass(frozen=True, slots=True)
class Signature:
    """A signature returned by the wallet."""

    data: bytes
    """Raw signature bytes."""

    type: int | None = None
    """Signature scheme reported by the wallet (1 = secp256k1, 2 = BLS)."""

    def hex(self) -> str:
        """Hex encoding of the signature bytes."""
        return self.data.hex()


@dataclass(frozen=True, slots=True)
class SignerAdapter:
    """Wallet signing against the chain daemon."""

    rpc: ChainRpc
    """Chain daemon access."""

    async def sign(self, key: str, message: bytes) -> Signature:
        """
        Sign `message` with the wallet key `key`.

        Raises:
            SigningUnavailable: If the wallet does not hold the key or returns nothing.
            ProtocolViolation: If the returned signature is not valid base64.
            ChainUnavailable: On transport failure.
            ChainRPCError: If the daemon reports any other error.
        """
        logger.debug("Signing %d bytes with %s", len(message), key)
        try:
            result = await self.rpc.wallet_sign(key, message)
        except ChainRPCError as exc:
            if _KEY_MISSING in exc.message:
                raise SigningUnavailable(key, exc.message) from exc
            raise

        if result is None or not result.data:
            raise SigningUnavailable(key, "wallet returned no signature")

        try:
            data = base64.b64decode(result.data, validate=True)
        except binascii.Error as exc:
            raise ProtocolViolation("Signature", detail=str(exc)) from exc

        return Signature(data=data, type=result.type)
