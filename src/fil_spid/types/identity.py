"""Storage provider identity."""

from __future__ import annotations

import re

from typing_extensions import Self

from .exceptions import InvalidInput

STORAGE_PROVIDER_ID_PATTERN = re.compile(r"f0[0-9]+")
"""ID-address form of a storage provider actor: `f0` followed by decimal digits."""


class StorageProviderId(str):
    """
    A syntactically valid storage provider ID such as `f01000`.

    Opaque beyond the syntax check. Whether the actor exists is only
    learned from the chain.
    """

    def __new__(cls, value: str) -> Self:
        """
        Validate and wrap an identity string.

        Raises:
            InvalidInput: If `value` is not of the form `f0<digits>`.
        """
        if not isinstance(value, str) or STORAGE_PROVIDER_ID_PATTERN.fullmatch(value) is None:
            raise InvalidInput(
                f"Expecting StorageProviderID ( f0xxxx ) as sole argument, got '{value}'"
            )
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"
