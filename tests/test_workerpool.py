import json
import threading
import time

import pytest
import requests
import responses

from metricsalerts.hashsign import is_hash_valid
from metricsalerts.models import Metrics
from metricsalerts.workerpool import (
    MetricsWorkerPool,
    generate_hash,
    send_metric,
)

SERVER = "http://localhost:8080"
UPDATE_URL = SERVER + "/update/"
KEY = "secret"


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_generate_hash_verifies_with_server_check():
    data = b'{"id":"Alloc","type":"gauge","value":1.5}'
    digest = generate_hash(data, KEY)
    assert len(digest) == 64
    assert is_hash_valid(digest, KEY, data)
    assert not is_hash_valid(digest, "placeholder", data)
    assert not is_hash_valid(digest, KEY, data + b" ")


def test_generate_hash_is_deterministic_lowercase_hex():
    digest = generate_hash(b"abc", KEY)
    assert digest == generate_hash(b"abc", KEY)
    assert digest == digest.lower()
    int(digest, 16)


def test_send_metric_posts_signed_json():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, UPDATE_URL, status=200)
        metric = Metrics(id="PollCount", mtype="counter", delta=1)
        response = send_metric(metric, KEY, SERVER)
        assert response.status_code == 200
        assert len(rsps.calls) == 1
        request = rsps.calls[0].request
    body = request.body if isinstance(request.body, bytes) else request.body.encode()
    assert json.loads(body) == {"id": "PollCount", "type": "counter", "delta": 1}
    assert request.headers["Content-Type"] == "application/json"
    assert is_hash_valid(request.headers["HashSHA256"], KEY, body)


def test_send_metric_rejects_non_ok_status():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, UPDATE_URL, status=501)
        with pytest.raises(requests.HTTPError, match="unexpected status code: 501"):
            send_metric(Metrics(id="Alloc", mtype="gauge", value=2.0), KEY, SERVER)


def test_send_metric_connection_failure_propagates():
    with responses.RequestsMock():
        with pytest.raises(requests.ConnectionError):
            send_metric(Metrics(id="Alloc", mtype="gauge", value=2.0), KEY, SERVER)


def test_pool_sends_all_queued_metrics():
    pool = MetricsWorkerPool(2)
    metrics = [
        Metrics(id="Alloc", mtype="gauge", value=1.0),
        Metrics(id="PollCount", mtype="counter", delta=1),
        Metrics(id="RandomValue", mtype="gauge", value=42.0),
    ]
    for metric in metrics:
        pool.jobs.put(metric)
    stop = threading.Event()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, UPDATE_URL, status=200)
        runner = threading.Thread(target=pool.run, args=(KEY, SERVER, stop))
        runner.start()
        try:
            assert _wait_for(lambda: len(rsps.calls) == 3)
        finally:
            stop.set()
            runner.join(timeout=5)
        sent = {json.loads(call.request.body)["id"] for call in rsps.calls}
    assert sent == {"Alloc", "PollCount", "RandomValue"}
    assert not runner.is_alive()
    assert pool.jobs.empty()


def test_pool_keeps_working_after_failures():
    pool = MetricsWorkerPool(1)
    pool.jobs.put(Metrics(id="Alloc", mtype="gauge", value=1.0))
    pool.jobs.put(Metrics(id="Sys", mtype="gauge", value=2.0))
    stop = threading.Event()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, UPDATE_URL, status=500)
        runner = threading.Thread(target=pool.run, args=(KEY, SERVER, stop))
        runner.start()
        try:
            assert _wait_for(lambda: len(rsps.calls) == 2)
        finally:
            stop.set()
            runner.join(timeout=5)
        assert len(rsps.calls) == 2
    assert not runner.is_alive()


def test_pool_without_workers_leaves_jobs_queued():
    pool = MetricsWorkerPool(0)
    pool.jobs.put(Metrics(id="Alloc", mtype="gauge", value=1.0))
    pool.run(KEY, SERVER, threading.Event())
    assert pool.jobs.qsize() == 1


def test_pool_stops_on_event_with_empty_queue():
    pool = MetricsWorkerPool(3)
    stop = threading.Event()
    runner = threading.Thread(target=pool.run, args=(KEY, SERVER, stop))
    runner.start()
    stop.set()
    runner.join(timeout=5)
    assert not runner.is_alive()