"""
Randomness Binder

Fetches the beacon entry for the *current* epoch.

Unlike identity resolution this lookup is never lagged. The entry is what
makes a signature unusable outside a narrow window: it cannot be
predicted ahead of time and it changes every epoch.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass

from fil_spid.chain import ChainEpoch
from fil_spid.rpc import ChainRpc
from fil_spid.types import BeaconUnavailable, Bytes96, ChainRPCError, ProtocolViolation

logger = logging.getLogger(__name__)

BEACON_ENTRY_LENGTH = Bytes96.LENGTH
"""Raw size of a beacon entry; its base64 form is exactly 128 characters, unpadded."""

_UNAVAILABLE_MARKERS = ("not available", "no entry", "not found")
"""Daemon error text meaning the entry has not been recorded or relayed yet."""


@dataclass(frozen=True, slots=True)
class RandomnessBinder:
    """Beacon entry lookups against the chain daemon."""

    rpc: ChainRpc
    """Chain daemon access."""

    async def get_beacon_entry(self, epoch: ChainEpoch) -> Bytes96:
        """
        Fetch and validate the beacon entry recorded for `epoch`.

        Raises:
            BeaconUnavailable: If the entry is not recorded yet (a null result).
            ProtocolViolation: If the entry is not exactly 96 bytes of valid base64,
                an empty one included.
            ChainUnavailable: On transport failure.
            ChainRPCError: If the daemon reports any other error.
        """
        try:
            entry = await self.rpc.beacon_get_entry(epoch)
        except ChainRPCError as exc:
            if any(marker in exc.message for marker in _UNAVAILABLE_MARKERS):
                raise BeaconUnavailable(epoch, exc.message) from exc
            raise

        if entry is None:
            raise BeaconUnavailable(epoch)

        return decode_beacon_entry(entry.data)


def decode_beacon_entry(data: str) -> Bytes96:
    """
    Decode a base64 beacon entry, enforcing its fixed width.

    Raises:
        ProtocolViolation: On invalid base64 or a length other than 96 bytes.
    """
    try:
        raw = base64.b64decode(data, validate=True)
    except binascii.Error as exc:
        raise ProtocolViolation("Beacon entry", detail=str(exc)) from exc

    if len(raw) != BEACON_ENTRY_LENGTH:
        raise ProtocolViolation("Beacon entry", expected=BEACON_ENTRY_LENGTH, actual=len(raw))

    return Bytes96(raw)
