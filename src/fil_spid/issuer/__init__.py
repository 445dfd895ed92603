"""Header issuance: from wall clock to signed credential."""

from .header import AUTH_SCHEME, format_header
from .payload import MAX_PAYLOAD_BYTES, PAD, compose, encode_payload, read_optional_payload
from .randomness import RandomnessBinder, decode_beacon_entry
from .resolver import ChainStateResolver
from .service import IssuerConfig, RetryPolicy, issue_header
from .signer import Signature, SignerAdapter

__all__ = [
    "AUTH_SCHEME",
    "MAX_PAYLOAD_BYTES",
    "PAD",
    "ChainStateResolver",
    "IssuerConfig",
    "RandomnessBinder",
    "RetryPolicy",
    "Signature",
    "SignerAdapter",
    "compose",
    "decode_beacon_entry",
    "encode_payload",
    "format_header",
    "issue_header",
    "read_optional_payload",
]
