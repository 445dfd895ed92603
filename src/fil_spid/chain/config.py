"""
Chain Configuration

Time and finality parameters of Filecoin mainnet that header issuance
depends on.
"""

from typing_extensions import Final

from fil_spid.types import StrictBaseModel

# --- Time Parameters ---

GENESIS_UNIX: Final = 1598306400
"""Unix timestamp (seconds) of mainnet genesis, when epoch 0 began."""

EPOCH_SECONDS: Final = 30
"""The fixed duration of a single epoch in seconds."""

# --- Finality ---

FINALITY_LAG: Final = 900
"""
Epochs subtracted from the current epoch to reach trusted state.

At 30 seconds per epoch this is 7.5 hours: long enough that every
RPC-serving node agrees on the state observed at that height.
"""


class _ChainConfig(StrictBaseModel):
    """
    A model holding the canonical, immutable configuration constants
    for the chain.
    """

    # Time Parameters
    genesis_unix: int
    epoch_seconds: int

    # Finality
    finality_lag: int


# The Mainnet Chain Configuration.
MAINNET_CONFIG: Final = _ChainConfig(
    genesis_unix=GENESIS_UNIX,
    epoch_seconds=EPOCH_SECONDS,
    finality_lag=FINALITY_LAG,
)
