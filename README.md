# metricsalerts

A small metrics service:

- a **server** that keeps gauge and counter metrics in memory, accepts
  updates and reads over HTTP as JSON, shows them on an HTML page and
  periodically saves them to a file;
- **agent-side building blocks** that sample process metrics at a fixed
  interval and send them to the server from a pool of worker threads,
  signing each request body with HMAC-SHA256.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
metricsalerts-server -a localhost:8080 -i 10
```

| Flag | Environment variable | Default          | Meaning                                   |
|------|----------------------|------------------|-------------------------------------------|
| `-a` | `ADDRESS`            | `localhost:8080` | Address to listen on, in `host:port` form |
| `-i` | `STORE_INTERVAL`     | `10`             | Seconds between saves to `metrics.json`   |

An environment variable, when set, takes precedence over its flag. The
`-a` port must be an integer; an address or interval that cannot be parsed
stops the command with an error message.

The server logs to stdout as JSON lines, writes the metrics to
`metrics.json` in the working directory at start-up and then every
interval, and tries to start listening up to 5 times, with a randomised
backoff of at most 3 seconds between attempts.

### Endpoints

- `POST /update/` — update a metric. The body is a JSON object:

  ```json
  {"id": "Alloc", "type": "gauge", "value": 1024.0}
  {"id": "PollCount", "type": "counter", "delta": 1}
  ```

  Gauges are replaced, counters are incremented. The response is the
  metric's id, type and current value as JSON. If the request carries a
  `HashSHA256` header, it must be the hex HMAC-SHA256 of the body under the
  key `secret` (`metricsalerts.server.HASH_KEY`); otherwise the reply is
  `400 Bad Request`. A successful signed request gets a `HashSHA256`
  response header holding the base64 HMAC-SHA256 of the response body.

- `POST /value/` — read a metric. Send `{"id": "...", "type": "gauge"}` or
  `"counter"`; the response holds the stored value.

- `GET /` — an HTML page listing every gauge and counter, sorted by name.
  Gzip-compressed when the client sends `Accept-Encoding: gzip`; a
  gzip-encoded request body is decompressed. Each request to this page is
  logged with its method, URI, status, size and elapsed time.

Malformed bodies, unknown metric types, missing `value`/`delta` and unknown
metrics are answered with `501 Not Implemented`.

## Using the library

Storage (`metricsalerts.storage`):

```python
from metricsalerts.storage import MemStorage, MetricNotFoundError

store = MemStorage()
store.update_gauge("Alloc", 1024.0)
store.update_counter("PollCount", 1)
store.update_counter("PollCount", 2)
store.get_counter("PollCount")      # 3
store.get_all_metrics()             # (gauges, counters) as copies
store.dump()                        # JSON bytes: {"counter":{...},"gauge":{...}}

store.enable_saves("metrics.json", 10)   # write now and every 10 s
store.stop_saves()

try:
    store.get_gauge("missing")
except MetricNotFoundError:
    ...
```

`Storage` is the abstract interface that `MemStorage` implements.

Metric payloads (`metricsalerts.models`):

```python
from metricsalerts.models import Metrics

m = Metrics.from_dict({"id": "Alloc", "type": "gauge", "value": 1.5})
m.to_json()   # unset delta/value are omitted
```

Retrying with exponential backoff and jitter (`metricsalerts.retry`):

```python
from metricsalerts.retry import with_retry, RetryError

with_retry(connect, max_tries=5, max_delay=3.0)
```

Between attempts it waits a random time below `2**attempt` seconds, capped
at `max_delay`. When every attempt fails, `RetryError` is raised with the
last error as its cause; setting the optional `cancel` event stops further
attempts with `InterruptedError`.

Other pieces:

- `metricsalerts.server.Server` — `build_app(handlers)` returns the WSGI
  application, `start(handlers)` serves it.
- `metricsalerts.handlers.StorageHandlers` — the request handlers.
- `metricsalerts.gzipmw.with_gzip`, `metricsalerts.hashsign.with_hash`,
  `metricsalerts.logger.with_logger` — the handler wrappers;
  `metricsalerts.hashsign.is_hash_valid` and `sign` do the HMAC work.
- `metricsalerts.helpers` — parses `/update/<type>/<key>/<value>` and
  `/value/<type>/<key>` style paths.
- `metricsalerts.flags.parse_address` — parses `host:port`.

### Agent side

```python
import threading
from metricsalerts.collector import collect_metrics
from metricsalerts.workerpool import MetricsWorkerPool

stop = threading.Event()
pool = MetricsWorkerPool(workers_num=3)
collect_metrics(pool.jobs, stop, poll_interval=2.0)
pool.run("secret", "http://localhost:8080", stop)   # blocks until stop is set
```

`read_metrics()` returns one sample: 27 gauges named after memory and GC
statistics, a `PollCount` counter with delta 1 and a `RandomValue` gauge
in `[0, 100)`. The gauges are approximations from the Python runtime
(garbage-collector stats, `tracemalloc`, resident memory); those with no
Python counterpart are reported as 0, and the allocation gauges stay at 0
unless `tracemalloc` is tracing. `send_metric` POSTs one metric to
`<server_url>/update/` with a hex `HashSHA256` header from
`generate_hash` and raises `requests.HTTPError` on any status other
than 200.

## What is not included

- There is no agent command: the collector and worker pool must be wired
  together in your own code, as above.
- Storage is in memory only, with periodic saving to a JSON file; saved
  metrics are not loaded back at start-up, and there is no database backend.