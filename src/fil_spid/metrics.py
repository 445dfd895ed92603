"""
Metric registry using prometheus_client.

Counts issuances and chain calls for services that embed the issuer.
Nothing is served from here; `generate_metrics()` renders the registry
in Prometheus text format for whatever endpoint the host exposes.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Create a dedicated registry for issuer metrics.
#
# Using a dedicated registry avoids pollution from default Python process metrics.
REGISTRY = CollectorRegistry()

issuances_total = Counter(
    "fil_spid_issuances_total",
    "Headers issued successfully",
    registry=REGISTRY,
)

issuance_failures_total = Counter(
    "fil_spid_issuance_failures_total",
    "Issuances aborted, by error class",
    ["error"],
    registry=REGISTRY,
)

rpc_calls_total = Counter(
    "fil_spid_rpc_calls_total",
    "JSON-RPC calls made to the chain daemon",
    ["method"],
    registry=REGISTRY,
)

issuance_seconds = Histogram(
    "fil_spid_issuance_seconds",
    "Time to issue a header, including all chain calls",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest(REGISTRY)
