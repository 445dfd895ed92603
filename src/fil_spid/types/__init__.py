"""Reusable type definitions for header issuance."""

from .base import PascalModel, StrictBaseModel
from .byte_arrays import BaseBytes, Bytes3, Bytes96
from .exceptions import (
    BeaconUnavailable,
    ChainEmptyResult,
    ChainError,
    ChainRPCError,
    ChainUnavailable,
    ConfigurationError,
    InvalidInput,
    ProtocolViolation,
    SigningUnavailable,
    SpidError,
    UnknownProvider,
)
from .identity import StorageProviderId

__all__ = [
    # Core types
    "BaseBytes",
    "Bytes3",
    "Bytes96",
    "PascalModel",
    "StrictBaseModel",
    "StorageProviderId",
    # Exceptions
    "SpidError",
    "InvalidInput",
    "ConfigurationError",
    "ChainError",
    "ChainUnavailable",
    "ChainRPCError",
    "ChainEmptyResult",
    "UnknownProvider",
    "BeaconUnavailable",
    "SigningUnavailable",
    "ProtocolViolation",
]
