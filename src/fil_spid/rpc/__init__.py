"""Chain daemon JSON-RPC access."""

from .api_info import ApiInfo
from .client import DEFAULT_TIMEOUT, ChainRpc, LotusClient
from .models import BeaconEntryResult, MinerInfo, SignatureResult, TipSetKey

__all__ = [
    "ApiInfo",
    "BeaconEntryResult",
    "ChainRpc",
    "DEFAULT_TIMEOUT",
    "LotusClient",
    "MinerInfo",
    "SignatureResult",
    "TipSetKey",
]
