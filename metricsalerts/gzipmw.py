"""Middleware that gzips responses and un-gzips request bodies."""

from __future__ import annotations

import gzip
import logging
import zlib
from collections.abc import Callable
from http import HTTPStatus
from io import BytesIO

from werkzeug.wrappers import Request, Response

log = logging.getLogger(__name__)

Handler = Callable[[Request], Response]


def _with_body(request: Request, body: bytes) -> Request:
    environ = dict(request.environ)
    environ["wsgi.input"] = BytesIO(body)
    environ["CONTENT_LENGTH"] = str(len(body))
    environ.pop("HTTP_CONTENT_ENCODING", None)
    return Request(environ)


def with_gzip(handler: Handler) -> Handler:
    """Wrap ``handler`` with gzip decoding of requests and encoding of responses."""

    def wrapped(request: Request) -> Response:
        gzip_supported = "gzip" in request.headers.get("Accept-Encoding", "")
        if "gzip" in request.headers.get("Content-Encoding", ""):
            try:
                body = gzip.decompress(request.get_data())
            except (OSError, EOFError, zlib.error):
                log.error("Unable to unzip body")
                return Response(status=HTTPStatus.INTERNAL_SERVER_ERROR)
            request = _with_body(request, body)

        response = handler(request)
        if gzip_supported and response.status_code < 300:
            response.set_data(gzip.compress(response.get_data()))
            response.headers["Content-Encoding"] = "gzip"
        return response

    return wrapped