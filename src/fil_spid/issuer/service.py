"""
Header issuance pipeline.

One issuance is a straight line of dependent steps:

1. Derive the current epoch from the wall clock
2. Fetch the tipset `FINALITY_LAG` epochs back
3. Resolve the provider's worker key in that finalized state
4. Fetch the beacon entry for the current epoch
5. Compose `PAD || beacon || payload`
6. Have the wallet sign it with the worker key
7. Format the header

Any failure aborts the issuance; no partial header is ever produced.
Nothing survives between issuances, so concurrent issuances need no
coordination beyond sharing the RPC client.

Retrying is opt-in. The default policy makes exactly one attempt. A policy
with more attempts reruns the whole pipeline, clock included, after
transient failures, so a missing beacon entry is retried against a later
epoch rather than the same one.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable

from pydantic import Field
from typing_extensions import Final

from fil_spid import metrics
from fil_spid.chain import EpochClock
from fil_spid.rpc import DEFAULT_TIMEOUT, ChainRpc
from fil_spid.types import (
    BeaconUnavailable,
    ChainUnavailable,
    SpidError,
    StorageProviderId,
    StrictBaseModel,
)

from .header import format_header
from .payload import MAX_PAYLOAD_BYTES, compose
from .randomness import RandomnessBinder
from .resolver import ChainStateResolver
from .signer import SignerAdapter

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS: Final = (ChainUnavailable, BeaconUnavailable)
"""Failures worth another attempt: the daemon or the beacon may catch up."""


class RetryPolicy(StrictBaseModel):
    """Bounded retries with full-jitter exponential backoff."""

    max_attempts: int = Field(default=1, ge=1)
    """Total attempts, including the first. 1 means fail fast."""

    base_delay_secs: float = Field(default=1.0, ge=0.0)
    """Backoff ceiling for the first retry; doubles for each later one."""

    max_delay_secs: float = Field(default=10.0, ge=0.0)
    """Upper bound on any single backoff ceiling."""

    def delay(self, attempt: int) -> float:
        """Random delay before retrying after failed attempt number `attempt` (1-based)."""
        ceiling = min(self.base_delay_secs * (2 ** (attempt - 1)), self.max_delay_secs)
        return random.uniform(0.0, ceiling)


class IssuerConfig(StrictBaseModel):
    """Runtime configuration for header issuance."""

    request_timeout_secs: float = Field(default=DEFAULT_TIMEOUT, gt=0.0)
    """Timeout for each chain daemon call."""

    max_payload_bytes: int = Field(default=MAX_PAYLOAD_BYTES, ge=0, le=MAX_PAYLOAD_BYTES)
    """Largest optional payload accepted; longer payloads are truncated."""

    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    """Retry behavior; defaults to a single attempt."""


async def issue_header(
    rpc: ChainRpc,
    provider_id: str,
    payload: bytes | None = None,
    *,
    clock: EpochClock | None = None,
    config: IssuerConfig | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> str:
    """
    Issue a header proving control of `provider_id`'s worker key.

    Args:
        rpc: Chain daemon access.
        provider_id: Storage provider ID, e.g. `f01000`.
        payload: Optional caller bytes to bind into the signature.
        clock: Epoch source; the mainnet wall clock by default.
        config: Issuance settings; defaults apply when omitted.
        sleep: Backoff sleep (injectable for testing).

    Returns:
        The header value, `FIL-SPID-V0 <epoch>;<sp>;<sig>[;<payload>]`.

    Raises:
        InvalidInput: If `provider_id` is malformed. Raised before any RPC call.
        SpidError: Any other issuance failure.
    """
    config = config or IssuerConfig()
    clock = clock or EpochClock()

    # Validation precedes every network call.
    sp = StorageProviderId(provider_id)

    if payload is not None and len(payload) > config.max_payload_bytes:
        logger.debug(
            "Truncating %d byte payload to %d bytes", len(payload), config.max_payload_bytes
        )
        payload = payload[: config.max_payload_bytes]

    policy = config.retry
    attempt = 1
    with metrics.issuance_seconds.time():
        while True:
            try:
                header = await _issue_once(rpc, sp, payload, clock)
            except RETRYABLE_ERRORS as exc:
                if attempt >= policy.max_attempts:
                    metrics.issuance_failures_total.labels(error=type(exc).__name__).inc()
                    raise
                delay = policy.delay(attempt)
                logger.warning(
                    "Attempt %d/%d failed (%s), retrying in %.2fs",
                    attempt,
                    policy.max_attempts,
                    exc,
                    delay,
                )
                await sleep(delay)
                attempt += 1
            except SpidError as exc:
                metrics.issuance_failures_total.labels(error=type(exc).__name__).inc()
                raise
            else:
                metrics.issuances_total.inc()
                return header


async def _issue_once(
    rpc: ChainRpc,
    provider_id: StorageProviderId,
    payload: bytes | None,
    clock: EpochClock,
) -> str:
    """Run the pipeline once, front to back."""
    epoch = clock.current_epoch()
    logger.debug("Issuing for %s at epoch %d", provider_id, epoch)

    resolver = ChainStateResolver(rpc, finality_lag=clock.finality_lag)
    tipset = await resolver.get_finalized_tipset(epoch)
    worker = await resolver.resolve_worker_key(provider_id, tipset)

    beacon = await RandomnessBinder(rpc).get_beacon_entry(epoch)

    message = compose(beacon, payload)
    signature = await SignerAdapter(rpc).sign(worker, message)

    return format_header(epoch, provider_id, signature, payload)
