"""
Fixed-width byte types.

A `BaseBytes` subclass is an immutable `bytes` whose length is checked
at construction, so a value of the type always has exactly `LENGTH` bytes.
"""

from __future__ import annotations

from typing import ClassVar, SupportsIndex

from typing_extensions import Self


class BaseBytes(bytes):
    """
    A base class for fixed-length byte types that inherits from `bytes`.

    Subclasses set:
      - `LENGTH`: exact number of bytes the instance must contain.
    """

    LENGTH: ClassVar[int]
    """The exact number of bytes (overridden by subclasses)."""

    def __new__(cls, value: bytes | bytearray | memoryview) -> Self:
        """
        Create and validate a new Bytes instance.

        Args:
            value: Raw bytes, copied into the new instance.

        Raises:
            TypeError: If `value` is not a bytes-like object.
            ValueError: If its length differs from `LENGTH`.
        """
        if not hasattr(cls, "LENGTH"):
            raise TypeError(f"{cls.__name__} must define LENGTH")
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"{cls.__name__} expects bytes, got {type(value).__name__}")

        b = bytes(value)
        if len(b) != cls.LENGTH:
            raise ValueError(f"{cls.__name__} expects exactly {cls.LENGTH} bytes, got {len(b)}")
        return super().__new__(cls, b)

    def __repr__(self) -> str:
        """Return a string representation of the bytes."""
        tname = type(self).__name__
        return f"{tname}({self.hex()})"

    def __hash__(self) -> int:
        """Return the hash of the bytes."""
        return hash((type(self), bytes(self)))

    def hex(self, sep: str | bytes | None = None, bytes_per_sep: SupportsIndex = 1) -> str:
        """Return the hexadecimal string representation of the underlying bytes."""
        return bytes(self).hex() if sep is None else bytes(self).hex(sep, bytes_per_sep)


class Bytes3(BaseBytes):
    """Fixed-size byte array of exactly 3 bytes."""

    LENGTH = 3


class Bytes96(BaseBytes):
    """Fixed-size byte array of exactly 96 bytes."""

    LENGTH = 96
