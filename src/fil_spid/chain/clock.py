"""
Epoch Clock
===========

Time-to-epoch conversion for Filecoin.

The epoch clock bridges wall-clock time to the discrete epoch model used
by the chain. The issued header names an epoch, and every relying service
recomputes the same epoch from its own clock to judge freshness.
"""

from dataclasses import dataclass
from time import time as wall_time
from typing import Callable, NewType

from .config import EPOCH_SECONDS, GENESIS_UNIX, MAINNET_CONFIG

ChainEpoch = NewType("ChainEpoch", int)
"""Epoch count since genesis."""


def epoch_at(
    unix_time: int | float,
    genesis_unix: int = GENESIS_UNIX,
    epoch_seconds: int = EPOCH_SECONDS,
) -> ChainEpoch:
    """
    Convert a Unix timestamp to the epoch in progress at that time.

    Uses floor division: fractional epochs are truncated, never rounded.
    Times before genesis map to epoch 0.
    """
    elapsed = int(unix_time) - genesis_unix
    if elapsed < 0:
        return ChainEpoch(0)
    return ChainEpoch(elapsed // epoch_seconds)


@dataclass(frozen=True, slots=True)
class EpochClock:
    """
    Converts wall-clock time to chain epochs.

    All time values are in seconds (Unix timestamps).
    """

    genesis_unix: int = MAINNET_CONFIG.genesis_unix
    """Unix timestamp (seconds) when epoch 0 began."""

    epoch_seconds: int = MAINNET_CONFIG.epoch_seconds
    """Duration of one epoch in seconds."""

    finality_lag: int = MAINNET_CONFIG.finality_lag
    """Epochs between the current epoch and the finalized one."""

    time_fn: Callable[[], float] = wall_time
    """Time source function (injectable for testing)."""

    def current_time(self) -> int:
        """Get current wall-clock time as whole Unix seconds."""
        return int(self.time_fn())

    def current_epoch(self) -> ChainEpoch:
        """Get the current epoch number (0 if before genesis)."""
        return epoch_at(self.current_time(), self.genesis_unix, self.epoch_seconds)
