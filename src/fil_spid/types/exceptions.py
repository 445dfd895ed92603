"""Exception hierarchy for header issuance."""

from __future__ import annotations


class SpidError(Exception):
    """
    Base exception for every issuance failure.

    No failure is recovered locally: each one aborts the issuance and
    surfaces to the caller.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidInput(SpidError):
    """Raised for bad identity syntax or a wrong argument count."""


class ConfigurationError(InvalidInput):
    """Raised when the chain daemon endpoint cannot be derived."""


class ChainError(SpidError):
    """Base class for failures reported by or about the chain daemon."""


class ChainUnavailable(ChainError):
    """Raised on transport failures and timeouts."""


class ChainRPCError(ChainError):
    """
    Raised when the daemon reports an application-level error.

    Attributes:
        method: The JSON-RPC method that failed.
        code: The JSON-RPC error code, when one was returned.
    """

    def __init__(self, method: str, detail: str, *, code: int | None = None) -> None:
        self.method = method
        self.code = code

        msg = f"{method} failed: {detail}"
        if code is not None:
            msg = f"{msg} (code {code})"

        super().__init__(msg)


class ChainEmptyResult(ChainError):
    """
    Raised when the daemon returns no tipset for a height.

    Attributes:
        height: The chain height that was queried.
    """

    def __init__(self, height: int) -> None:
        self.height = height
        super().__init__(f"No tipset returned for height {height}")


class UnknownProvider(ChainError):
    """
    Raised when a storage provider has no resolvable miner info.

    Attributes:
        provider_id: The storage provider that was looked up.
    """

    def __init__(self, provider_id: str, detail: str | None = None) -> None:
        self.provider_id = provider_id

        msg = f"Storage provider {provider_id} has no resolvable miner info"
        if detail:
            msg = f"{msg}: {detail}"

        super().__init__(msg)


class BeaconUnavailable(ChainError):
    """
    Raised when the beacon entry for an epoch is not yet recorded.

    Usually transient: the entry appears once the chain relays it.

    Attributes:
        epoch: The epoch whose entry was requested.
    """

    def __init__(self, epoch: int, detail: str | None = None) -> None:
        self.epoch = epoch

        msg = f"Beacon entry for epoch {epoch} is not available"
        if detail:
            msg = f"{msg}: {detail}"

        super().__init__(msg)


class SigningUnavailable(ChainError):
    """
    Raised when the signing backend does not hold the requested key.

    Attributes:
        key: The key identifier passed to the wallet.
    """

    def __init__(self, key: str, detail: str | None = None) -> None:
        self.key = key

        msg = f"Key {key} is not available for signing"
        if detail:
            msg = f"{msg}: {detail}"

        super().__init__(msg)


class ProtocolViolation(SpidError):
    """
    Raised when a collaborator response breaks a fixed-width or format invariant.

    Attributes:
        what: The value that was malformed.
        expected: The expected length in bytes (if applicable).
        actual: The length received (if applicable).
    """

    def __init__(
        self,
        what: str,
        *,
        expected: int | None = None,
        actual: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.what = what
        self.expected = expected
        self.actual = actual

        if expected is not None and actual is not None:
            msg = f"{what} must be exactly {expected} bytes, got {actual}"
        elif detail:
            msg = f"{what} is malformed: {detail}"
        else:
            msg = f"{what} is malformed"

        super().__init__(msg)
