"""HTTP handlers that read and update metrics in a storage."""

from __future__ import annotations

import json
import logging
from http import HTTPStatus

from werkzeug.wrappers import Request, Response

from .models import Metrics
from .storage import MetricNotFoundError, Storage

log = logging.getLogger(__name__)

GAUGE = "gauge"
COUNTER = "counter"


def _decode(request: Request) -> Metrics:
    text = request.get_data().decode("utf-8")
    data, _ = json.JSONDecoder().raw_decode(text.lstrip())
    return Metrics.from_dict(data)


def _failure() -> Response:
    return Response(status=HTTPStatus.NOT_IMPLEMENTED)


def _reply(metric: Metrics, value: float) -> Response:
    body = Metrics(id=metric.id, mtype=metric.mtype, value=value).to_json() + "\n"
    return Response(body, mimetype="application/json")


class StorageHandlers:
    """Request handlers bound to one metric storage."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def update_metric(self, request: Request) -> Response:
        """Store the metric in the JSON body and return its new value."""
        try:
            metric = _decode(request)
        except ValueError as exc:
            log.error("%s", exc)
            return _failure()

        if metric.mtype == GAUGE:
            if metric.value is None:
                log.error("Error while updating metric: no value, id=%s", metric.id)
                return _failure()
            stored = float(self._storage.update_gauge(metric.id, metric.value))
        elif metric.mtype == COUNTER:
            if metric.delta is None:
                log.error("Error while updating metric: no delta, id=%s", metric.id)
                return _failure()
            stored = float(self._storage.update_counter(metric.id, metric.delta))
        else:
            log.info("Incorrect metric type: %s", metric.mtype)
            return _failure()
        return _reply(metric, stored)

    def get_metric(self, request: Request) -> Response:
        """Return the stored value of the metric named in the JSON body."""
        try:
            metric = _decode(request)
        except ValueError as exc:
            log.error("%s", exc)
            return _failure()

        try:
            if metric.mtype == GAUGE:
                stored = float(self._storage.get_gauge(metric.id))
            elif metric.mtype == COUNTER:
                stored = float(self._storage.get_counter(metric.id))
            else:
                log.info("Incorrect metric type: %s", metric.mtype)
                return _failure()
        except MetricNotFoundError:
            log.error("Error while reading metric: type=%s id=%s", metric.mtype, metric.id)
            return _failure()
        return _reply(metric, stored)

    def get_all_metrics(self, request: Request) -> Response:
        """Return an HTML page listing every gauge and counter."""
        gauge, counter = self._storage.get_all_metrics()
        parts = ["<html><body><h1>Metrics</h1><ul><h2>Gauge:</h2>"]
        parts.extend("<li>%s: %f</li>" % (key, value) for key, value in sorted(gauge.items()))
        parts.append("<h2>Counter:</h2><ul>")
        parts.extend("<li>%s: %d</li>" % (key, value) for key, value in sorted(counter.items()))
        parts.append("</ul></body></html>")
        return Response("".join(parts), status=HTTPStatus.OK, mimetype="text/html")