"""
Chain State Resolver

Resolves which key may speak for a storage provider.

The worker key is read from the state at `current - FINALITY_LAG`, never
from the chain head. Near the head, a key-rotation message could be
raced into a short-lived fork to impersonate a provider for a few
epochs. At the finalized height every RPC-serving node agrees on the
observed state, at the price of honoring a rotation only hours later.

The key is resolved fresh for every issuance and never cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fil_spid.chain import FINALITY_LAG, ChainEpoch
from fil_spid.rpc import ChainRpc, TipSetKey
from fil_spid.types import ChainEmptyResult, ChainRPCError, StorageProviderId, UnknownProvider

logger = logging.getLogger(__name__)

_ACTOR_NOT_FOUND = "not found"
"""Daemon error text for an address that resolves to no actor."""


@dataclass(frozen=True, slots=True)
class ChainStateResolver:
    """Finalized-state lookups against the chain daemon."""

    rpc: ChainRpc
    """Chain daemon access."""

    finality_lag: int = FINALITY_LAG
    """Epochs between the current epoch and the trusted one."""

    async def get_finalized_tipset(self, epoch: ChainEpoch) -> TipSetKey:
        """
        Fetch the tipset `finality_lag` epochs behind `epoch`.

        Args:
            epoch: The current epoch.

        Raises:
            ChainEmptyResult: If the daemon has no tipset at that height.
            ChainUnavailable: On transport failure.
            ChainRPCError: If the daemon reports an error.
        """
        height = epoch - self.finality_lag
        logger.debug("Fetching finalized tipset at height %d (current epoch %d)", height, epoch)

        tipset = await self.rpc.chain_get_tipset_by_height(height)
        if tipset is None or not tipset.cids:
            raise ChainEmptyResult(height)
        return tipset

    async def resolve_worker_key(self, provider_id: StorageProviderId, tipset: TipSetKey) -> str:
        """
        Look up the provider's worker key as of `tipset`.

        Raises:
            UnknownProvider: If the provider has no miner info at that tipset.
            ChainUnavailable: On transport failure.
            ChainRPCError: If the daemon reports any other error.
        """
        try:
            info = await self.rpc.state_miner_info(provider_id, tipset)
        except ChainRPCError as exc:
            if _ACTOR_NOT_FOUND in exc.message:
                raise UnknownProvider(provider_id, exc.message) from exc
            raise

        if info is None or not info.worker:
            raise UnknownProvider(provider_id)

        logger.debug("Resolved worker key %s for %s", info.worker, provider_id)
        return info.worker
