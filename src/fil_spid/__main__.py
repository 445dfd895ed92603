"""
Filecoin storage provider ID header CLI entry point.

Prints a stateless `Authorization` header value proving control of a
storage provider's worker key.

Usage::

    fil-spid f01000
    curl -sLH "Authorization: $( fil-spid f01000 )" https://example.com/api
    sha256sum request.json | fil-spid f01000

Up to 2048 bytes read from a non-terminal STDIN are bound into the
signature and echoed, base64-encoded, as the header's last field.

The chain daemon is located through FULLNODE_API_INFO, or through the
`api` and `token` files under LOTUS_PATH (default ~/.lotus).

Options:
    --verbose     Log every chain call
    --no-color    Disable ANSI colors in log output
    --timeout     Per-call timeout in seconds (default: 5)
    --retries     Extra attempts after transient chain failures (default: 0)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import BinaryIO, Sequence

from pydantic import ValidationError

from fil_spid.issuer import IssuerConfig, RetryPolicy, issue_header, read_optional_payload
from fil_spid.rpc import ApiInfo, LotusClient
from fil_spid.types import SpidError, StorageProviderId

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

HANDLER_NAME = "fil-spid"
"""Name of the stderr handler installed by `setup_logging`."""


class ColoredFormatter(logging.Formatter):
    """Log formatter that colors the level name on ANSI terminals."""

    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[38;5;244m",
        logging.INFO: "\x1b[38;5;40m",
        logging.WARNING: "\x1b[38;5;220m",
        logging.ERROR: "\x1b[38;5;196m",
    }

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT, datefmt=LOG_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        """Format the record with its level name colored."""
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        # Color a copy; other handlers see the original record.
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname:8}{self.RESET}"
        return super().format(colored)


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """
    Configure logging on stderr with optional colors.

    Stdout is reserved for the header itself. Calling this again replaces
    the handler installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setLevel(level)

    # Colors only make sense on a terminal.
    if no_color or not sys.stderr.isatty():
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    else:
        handler.setFormatter(ColoredFormatter())

    root = logging.getLogger()
    for previous in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(previous)
    root.setLevel(level)
    root.addHandler(handler)

    # httpx logs every request at INFO; keep that for --verbose.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def read_stdin_payload(stdin: BinaryIO, limit: int) -> bytes | None:
    """
    Read the optional payload from STDIN unless it is a terminal.

    The whole payload is consumed before issuance begins.
    """
    if stdin.isatty():
        return None

    payload = read_optional_payload(stdin, limit)
    if payload:
        # Base64 grows by 4/3, padded to a multiple of 4.
        encoded_length = 4 * ((len(payload) + 2) // 3)
        logger.info("optional input from STDIN encoded as %d base64 bytes", encoded_length)
    return payload


async def run(
    provider_id: StorageProviderId,
    payload: bytes | None,
    config: IssuerConfig,
    api_info: ApiInfo,
) -> str:
    """
    Issue one header against the daemon described by `api_info`.

    Args:
        provider_id: Validated storage provider ID.
        payload: Optional bytes to bind into the signature.
        config: Issuance settings.
        api_info: Resolved daemon endpoint and token.

    Returns:
        The header value.
    """
    async with LotusClient(api_info, timeout=config.request_timeout_secs) as rpc:
        return await issue_header(rpc, provider_id, payload, config=config)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="fil-spid",
        description="Issue a FIL-SPID-V0 authorization header for a storage provider",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "provider_id",
        metavar="STORAGE_PROVIDER_ID",
        help="Storage provider ID (f0xxxx)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=IssuerConfig().request_timeout_secs,
        help="Per-call timeout for chain daemon requests in seconds (default: 5)",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=0,
        help="Extra attempts after transient chain failures (default: 0, fail fast)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored log output",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, no_color=args.no_color)

    try:
        config = IssuerConfig(
            request_timeout_secs=args.timeout,
            retry=RetryPolicy(max_attempts=max(args.retries, 0) + 1),
        )
    except ValidationError as e:
        parser.error(str(e))

    try:
        # Validate the identity before touching STDIN or the network.
        provider_id = StorageProviderId(args.provider_id)

        payload = read_stdin_payload(sys.stdin.buffer, config.max_payload_bytes)
        api_info = ApiInfo.discover()

        header = asyncio.run(run(provider_id, payload, config, api_info))
    except SpidError as e:
        logger.error("%s: %s", type(e).__name__, e.message)
        return 1

    print(header)
    return 0


if __name__ == "__main__":
    sys.exit(main())
