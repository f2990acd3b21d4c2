"""Worker pool that sends collected metrics to the server."""

from __future__ import annotations

import hashlib
import hmac
import logging
import queue
import threading
from http import HTTPStatus

import requests

from .models import Metrics

log = logging.getLogger(__name__)

HASH_HEADER = "HashSHA256"
JOBS_CAPACITY = 10
_POLL_TIMEOUT = 0.1


def generate_hash(data: bytes, private_key: str) -> str:
    """Return the hex HMAC-SHA256 of ``data`` under ``private_key``."""
    return hmac.new(private_key.encode(), data, hashlib.sha256).hexdigest()


def send_metric(metric: Metrics, private_key: str, server_url: str) -> requests.Response:
    """POST ``metric`` as signed JSON to ``<server_url>/update/``.

    Raises ``requests.HTTPError`` if the server does not answer 200 OK.
    """
    body = metric.to_json().encode()
    headers = {
        "Content-Type": "application/json",
        HASH_HEADER: generate_hash(body, private_key),
    }
    with requests.Session() as session:
        response = session.post(f"{server_url}/update/", data=body, headers=headers)
    response.close()
    if response.status_code != HTTPStatus.OK:
        raise requests.HTTPError(
            f"unexpected status code: {response.status_code}", response=response
        )
    return response


class MetricsWorkerPool:
    """A fixed number of threads taking metrics from ``jobs`` and sending them."""

    def __init__(self, workers_num: int) -> None:
        self.jobs: queue.Queue[Metrics] = queue.Queue(maxsize=JOBS_CAPACITY)
        self.workers_num = workers_num

    def _work(self, private_key: str, server_url: str, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                metric = self.jobs.get(timeout=_POLL_TIMEOUT)
            except queue.Empty:
                continue
            if stop_event.is_set():
                return
            try:
                send_metric(metric, private_key, server_url)
            except requests.RequestException as exc:
                log.error("%s", exc)

    def run(self, private_key: str, server_url: str, stop_event: threading.Event) -> None:
        """Send queued metrics until ``stop_event`` is set; blocks until the workers end."""
        workers = [
            threading.Thread(
                target=self._work,
                args=(private_key, server_url, stop_event),
                name=f"metrics-worker-{number}",
                daemon=True,
            )
            for number in range(self.workers_num)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()