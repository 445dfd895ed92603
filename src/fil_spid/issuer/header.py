"""
Header Formatter

Serializes an issued credential into its header value:

    FIL-SPID-V0 <epoch>;<storage-provider-id>;<hex-signature>[;<base64-payload>]

The epoch is the current one, the same epoch whose beacon entry was signed.
The payload field appears only when a payload was bound into the signature.
"""

from __future__ import annotations

from typing_extensions import Final

from fil_spid.chain import ChainEpoch
from fil_spid.types import StorageProviderId

from .payload import encode_payload
from .signer import Signature

AUTH_SCHEME: Final = "FIL-SPID-V0"
"""Scheme token that opens the `Authorization` header value."""

FIELD_SEPARATOR: Final = ";"


def format_header(
    epoch: ChainEpoch,
    provider_id: StorageProviderId,
    signature: Signature,
    payload: bytes | None = None,
) -> str:
    """Render the header value. No validation beyond what upstream guaranteed."""
    fields = [str(epoch), str(provider_id), signature.hex()]
    if payload:
        fields.append(encode_payload(payload))
    return f"{AUTH_SCHEME} {FIELD_SEPARATOR.join(fields)}"
