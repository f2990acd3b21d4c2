"""Command-line value types."""

from __future__ import annotations

import re
from dataclasses import dataclass

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Address:
    """A network address as separate host and port strings."""

    host: str = "localhost"
    port: str = "8080"

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def parse_address(value: str) -> Address:
    """Parse ``host:port``; the port must be a decimal integer."""
    parts = value.split(":")
    if len(parts) != 2:
        raise ValueError("input host and port in host:port format")
    host, port = parts
    if not _INT_RE.fullmatch(port) or not _INT64_MIN <= int(port) <= _INT64_MAX:
        raise ValueError("port is incorrect")
    return Address(host=host, port=port)