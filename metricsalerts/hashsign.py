"""HMAC-SHA256 signing of request and response bodies."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import re
from collections.abc import Callable
from http import HTTPStatus

from werkzeug.wrappers import Request, Response

log = logging.getLogger(__name__)

HASH_HEADER = "HashSHA256"

_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})*")

Handler = Callable[[Request], Response]


def _digest(data: bytes, key: str) -> bytes:
    return hmac.new(key.encode(), data, hashlib.sha256).digest()


def is_hash_valid(hash_hex: str, key: str, data: bytes) -> bool:
    """Return whether ``hash_hex`` is the hex HMAC-SHA256 of ``data`` under ``key``."""
    if not _HEX_RE.fullmatch(hash_hex):
        return False
    return hmac.compare_digest(_digest(data, key), bytes.fromhex(hash_hex))


def sign(data: bytes, key: str) -> str:
    """Return the base64 HMAC-SHA256 of ``data`` under ``key``."""
    return base64.b64encode(_digest(data, key)).decode("ascii")


def with_hash(handler: Handler, key: str) -> Handler:
    """Check the request signature, if one is sent, and sign the response."""

    def wrapped(request: Request) -> Response:
        received = request.headers.get(HASH_HEADER, "")
        if not received:
            return handler(request)

        body = request.get_data()
        if not is_hash_valid(received, key, body):
            log.error("Error in hash")
            return Response(status=HTTPStatus.BAD_REQUEST)

        response = handler(request)
        if response.status_code < 300:
            response.headers[HASH_HEADER] = sign(response.get_data(), key)
        return response

    return wrapped