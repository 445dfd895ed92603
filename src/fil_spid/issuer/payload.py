"""
Payload Composer

Builds the exact bytes the worker key signs:

    PAD (3 bytes) || beacon entry (96 bytes) || optional payload (0..2048 bytes)

PAD is three ASCII spaces. 0x20 is a complete one-byte CBOR item (the
integer -1), so any longer message starting with it is not a single
well-formed CBOR value, and a signature over these bytes can never double
as a signature over a chain-native structure.

Both PAD and the beacon entry have lengths divisible by 3, so each encodes
to base64 without padding characters. The base64 of the whole message is
therefore the plain concatenation of the parts' base64 forms, and the
payload needs no length prefix or delimiter.
"""

from __future__ import annotations

import base64
from typing import BinaryIO

from typing_extensions import Final

from fil_spid.types import Bytes3, Bytes96

PAD: Final = Bytes3(b"   ")
"""Signed-message prefix that keeps the message from parsing as CBOR."""

MAX_PAYLOAD_BYTES: Final = 2048
"""Largest optional payload bound into a header; longer input is truncated."""


def compose(beacon: Bytes96, payload: bytes | None = None) -> bytes:
    """Concatenate PAD, the beacon entry, and the optional payload, untransformed."""
    return bytes(PAD) + bytes(beacon) + (payload or b"")


def encode_payload(payload: bytes) -> str:
    """Standard base64 of a payload, without line wraps."""
    return base64.b64encode(payload).decode("ascii")


def read_optional_payload(stream: BinaryIO | None, limit: int = MAX_PAYLOAD_BYTES) -> bytes | None:
    """
    Read at most `limit` bytes from `stream`, once.

    Reads until `limit` bytes are collected or the stream ends, so short
    reads from pipes do not cut the payload early. Anything beyond `limit`
    is left unread.

    Returns:
        The bytes read, or None if the stream is absent or empty.
    """
    if stream is None:
        return None

    chunks: list[bytes] = []
    remaining = limit
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)

    data = b"".join(chunks)
    return data or None
