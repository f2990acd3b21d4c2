"""Command that starts the metrics server."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Mapping, Sequence

from .flags import Address, parse_address
from .handlers import StorageHandlers
from .logger import init_logging
from .retry import RetryError, with_retry
from .server import Server
from .storage import MemStorage

log = logging.getLogger(__name__)

SAVE_FILE = "metrics.json"
DEFAULT_STORE_INTERVAL = "10"


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="metricsalerts-server")
    parser.add_argument("-a", dest="address", default="localhost:8080",
                        help="Address in host:port fmt")
    parser.add_argument("-i", dest="interval", default=DEFAULT_STORE_INTERVAL,
                        help="Save metrics in file interval in seconds")
    return parser.parse_args(list(argv))


def resolve_address(argv: Sequence[str], environ: Mapping[str, str]) -> Address:
    """Take the address from ``ADDRESS`` if set, otherwise from ``-a``."""
    if "ADDRESS" in environ:
        parts = environ["ADDRESS"].split(":")
        if len(parts) != 2:
            raise ValueError("incorrect env var")
        return Address(host=parts[0], port=parts[1])
    return parse_address(_parse_args(argv).address)


def resolve_store_interval(argv: Sequence[str], environ: Mapping[str, str]) -> int:
    """Take the save interval in seconds from ``STORE_INTERVAL`` or ``-i``."""
    text = environ["STORE_INTERVAL"] if "STORE_INTERVAL" in environ else _parse_args(argv).interval
    try:
        interval = int(text)
    except ValueError:
        raise ValueError("incorrect env var") from None
    if interval < 0:
        raise ValueError("incorrect env var")
    return interval


def main(argv: Sequence[str] | None = None) -> int:
    """Start the server and serve until it stops."""
    args = sys.argv[1:] if argv is None else list(argv)
    init_logging()
    storage = MemStorage()
    handlers = StorageHandlers(storage)
    try:
        address = resolve_address(args, os.environ)
        interval = resolve_store_interval(args, os.environ)
    except ValueError as exc:
        log.error("%s", exc)
        raise SystemExit(str(exc)) from exc

    storage.enable_saves(SAVE_FILE, interval)
    log.info("Server is started listening", extra={"address": str(address)})
    server = Server(address.host, address.port)
    try:
        with_retry(lambda: server.start(handlers), 5, 3.0)
    except RetryError as exc:
        log.error("%s", exc)
        raise
    finally:
        storage.stop_saves()
    return 0