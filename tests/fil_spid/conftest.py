"""Shared pytest fixtures for fil_spid tests."""

from __future__ import annotations

import pytest

from tests.fil_spid.helpers import FakeChainRpc


@pytest.fixture
def fake_rpc() -> FakeChainRpc:
    """A chain daemon fake with healthy default answers."""
    return FakeChainRpc()
