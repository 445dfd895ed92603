"""Test helpers for fil_spid unit tests."""

from __future__ import annotations

from .builders import (
    TEST_BEACON,
    TEST_GENESIS,
    TEST_SIGNATURE,
    TEST_WORKER,
    make_clock,
    make_tipset,
    unix_time_for_epoch,
)
from .fake_rpc import FakeChainRpc

__all__ = [
    "FakeChainRpc",
    "TEST_BEACON",
    "TEST_GENESIS",
    "TEST_SIGNATURE",
    "TEST_WORKER",
    "make_clock",
    "make_tipset",
    "unix_time_for_epoch",
]
