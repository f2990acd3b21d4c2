"""The HTTP server exposing the metric handlers."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from werkzeug.exceptions import HTTPException
from werkzeug.routing import Map, Rule
from werkzeug.serving import BaseWSGIServer, make_server
from werkzeug.wrappers import Request, Response

from .gzipmw import with_gzip
from .handlers import StorageHandlers
from .hashsign import with_hash
from .logger import with_logger

HASH_KEY = "secret"

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]


class Server:
    """Routes requests to the handlers and serves them over HTTP."""

    def __init__(self, host: str, port: str) -> None:
        self.host = host
        self.port = port
        self._httpd: BaseWSGIServer | None = None

    def build_app(self, handlers: StorageHandlers) -> WSGIApp:
        """Return the WSGI application routing to ``handlers``."""
        views = {
            "update": with_hash(handlers.update_metric, HASH_KEY),
            "value": handlers.get_metric,
            "index": with_logger(with_gzip(handlers.get_all_metrics)),
        }
        url_map = Map(
            [
                Rule("/update/", methods=["POST"], endpoint="update"),
                Rule("/update/<path:rest>", methods=["POST"], endpoint="update"),
                Rule("/value/", methods=["POST"], endpoint="value"),
                Rule("/value/<path:rest>", methods=["POST"], endpoint="value"),
                Rule("/", methods=["GET"], endpoint="index"),
                Rule("/<path:rest>", methods=["GET"], endpoint="index"),
            ]
        )

        def app(environ, start_response):
            request = Request(environ)
            adapter = url_map.bind_to_environ(environ)
            try:
                endpoint, _ = adapter.match()
                response: Response | HTTPException = views[endpoint](request)
            except HTTPException as exc:
                response = exc
            return response(environ, start_response)

        return app

    def start(self, handlers: StorageHandlers) -> None:
        """Listen on the configured address and serve until shut down."""
        self._httpd = make_server(self.host, int(self.port), self.build_app(handlers))
        self._httpd.serve_forever()