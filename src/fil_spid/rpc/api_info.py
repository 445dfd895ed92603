"""
Chain daemon endpoint discovery.

Resolves where the chain daemon's JSON-RPC API listens and which token
authorizes it, following the conventions of the Lotus tooling:

- `FULLNODE_API_INFO="<token>:<multiaddr>"` wins when set
- otherwise `$LOTUS_PATH/token` and `$LOTUS_PATH/api` (default `~/.lotus`)
- otherwise a token-less local daemon on `/ip4/127.0.0.1/tcp/1234/http`

The result is an explicit `ApiInfo` handed to the RPC client at
construction. Nothing else in the package reads the environment.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from pydantic import Field

from fil_spid.types import ConfigurationError, StrictBaseModel

logger = logging.getLogger(__name__)

DEFAULT_MULTIADDR = "/ip4/127.0.0.1/tcp/1234/http"
"""Where a locally running daemon listens by default."""

RPC_PATH = "/rpc/v0"
"""JSON-RPC endpoint path on the daemon."""

_WILDCARD_PREFIXES = ("/ip4/0.0.0.0/", "/ip6/::/")
"""Listen addresses that cannot be dialed; an api file announcing one is ignored."""

_HOST_PROTOCOLS = frozenset({"ip4", "ip6", "dns", "dns4", "dns6"})


class ApiInfo(StrictBaseModel):
    """Connection details for the chain daemon's JSON-RPC API."""

    host: str
    """Hostname or IP literal (IPv6 without brackets)."""

    port: int = Field(ge=1, le=65535)
    """TCP port."""

    token: str = Field(default="", repr=False)
    """Bearer token; empty for an unauthenticated daemon."""

    ipv6: bool = False
    """Whether `host` is an IPv6 literal that must be bracketed in URLs."""

    @property
    def rpc_url(self) -> str:
        """Full URL of the JSON-RPC endpoint."""
        host = f"[{self.host}]" if self.ipv6 else self.host
        return f"http://{host}:{self.port}{RPC_PATH}"

    @property
    def headers(self) -> dict[str, str]:
        """HTTP headers that authorize requests against the daemon."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    @classmethod
    def from_multiaddr(cls, multiaddr: str, token: str = "") -> ApiInfo:
        """
        Build connection details from a multiaddr such as `/ip4/10.0.0.1/tcp/1234/http`.

        Raises:
            ConfigurationError: If the multiaddr lacks a host or TCP port.
        """
        parts = multiaddr.strip().split("/")

        # A leading slash yields an empty first element.
        if len(parts) < 5 or parts[0] != "":
            raise ConfigurationError(f"Malformed daemon multiaddr '{multiaddr}'")

        _, net_proto, host, transport, port = parts[:5]
        if net_proto not in _HOST_PROTOCOLS or not host:
            raise ConfigurationError(f"Unsupported network protocol in multiaddr '{multiaddr}'")
        if transport != "tcp":
            raise ConfigurationError(f"Daemon multiaddr '{multiaddr}' is not a TCP address")
        if not port.isdigit() or not 0 < int(port) <= 65535:
            raise ConfigurationError(f"Invalid port in daemon multiaddr '{multiaddr}'")

        return cls(host=host, port=int(port), token=token, ipv6=net_proto == "ip6")

    @classmethod
    def from_api_info_string(cls, value: str) -> ApiInfo:
        """
        Parse a `<token>:<multiaddr>` string.

        The token never contains a colon; everything after the first one
        is the multiaddr.
        """
        token, sep, multiaddr = value.strip().partition(":")
        if not sep:
            raise ConfigurationError("FULLNODE_API_INFO must have the form '<token>:<multiaddr>'")
        return cls.from_multiaddr(multiaddr, token=token)

    @classmethod
    def discover(cls, environ: Mapping[str, str] | None = None) -> ApiInfo:
        """
        Resolve connection details from the environment and repo files.

        Args:
            environ: Environment mapping; defaults to `os.environ`.

        Raises:
            ConfigurationError: If the resolved multiaddr is unusable, or a repo
                file exists but cannot be read.
        """
        env = os.environ if environ is None else environ

        explicit = env.get("FULLNODE_API_INFO")
        if explicit:
            logger.debug("Using daemon endpoint from FULLNODE_API_INFO")
            return cls.from_api_info_string(explicit)

        repo = lotus_repo_path(env)
        token = _read_text(repo / "token")
        multiaddr = _read_text(repo / "api")

        if any(prefix in multiaddr for prefix in _WILDCARD_PREFIXES):
            logger.debug("Ignoring wildcard listen address %s in %s", multiaddr, repo / "api")
            multiaddr = ""

        if not multiaddr:
            multiaddr = DEFAULT_MULTIADDR

        logger.debug("Using daemon endpoint %s from repo %s", multiaddr, repo)
        return cls.from_multiaddr(multiaddr, token=token)


def lotus_repo_path(environ: Mapping[str, str]) -> Path:
    """Location of the daemon repo: `$LOTUS_PATH`, else `~/.lotus`."""
    configured = environ.get("LOTUS_PATH")
    if configured:
        return Path(configured).expanduser()
    home = environ.get("HOME")
    base = Path(home) if home else Path.home()
    return base / ".lotus"


def _read_text(path: Path) -> str:
    """
    Read and strip a small text file, or return an empty string if it is absent.

    Raises:
        ConfigurationError: If the file exists but cannot be read as UTF-8 text.
    """
    try:
        return path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return ""
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read daemon repo file {path}: {exc}") from exc
