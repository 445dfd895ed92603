"""Chain time and finality parameters."""

from .clock import ChainEpoch, EpochClock, epoch_at
from .config import EPOCH_SECONDS, FINALITY_LAG, GENESIS_UNIX, MAINNET_CONFIG

__all__ = [
    "ChainEpoch",
    "EpochClock",
    "epoch_at",
    "EPOCH_SECONDS",
    "FINALITY_LAG",
    "GENESIS_UNIX",
    "MAINNET_CONFIG",
]
