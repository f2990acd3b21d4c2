"""Periodic sampling of process runtime metrics for the agent."""

from __future__ import annotations

import gc
import queue
import random
import sys
import threading
import time
import tracemalloc

from .models import Metrics

try:
    import resource
except ImportError:  # not available on every platform
    resource = None  # type: ignore[assignment]

GAUGE = "gauge"
COUNTER = "counter"

GAUGE_NAMES = (
    "Alloc",
    "BuckHashSys",
    "Frees",
    "GCCPUFraction",
    "GCSys",
    "HeapAlloc",
    "HeapIdle",
    "HeapInuse",
    "HeapObjects",
    "HeapReleased",
    "HeapSys",
    "LastGC",
    "Lookups",
    "MCacheInuse",
    "MCacheSys",
    "MSpanInuse",
    "MSpanSys",
    "Mallocs",
    "NextGC",
    "NumForcedGC",
    "NumGC",
    "OtherSys",
    "PauseTotalNs",
    "StackInuse",
    "StackSys",
    "Sys",
    "TotalAlloc",
)

_PUT_TIMEOUT = 0.1


class _GCTracker:
    """Records when collections finish and how long they take."""

    def __init__(self) -> None:
        self.last_gc_ns = 0
        self.pause_total_ns = 0
        self._started: int | None = None

    def __call__(self, phase: str, info: dict) -> None:
        if phase == "start":
            self._started = time.perf_counter_ns()
        elif phase == "stop":
            now = time.perf_counter_ns()
            if self._started is not None:
                self.pause_total_ns += now - self._started
                self._started = None
            self.last_gc_ns = time.time_ns()


_gc_tracker = _GCTracker()
gc.callbacks.append(_gc_tracker)


def _resident_bytes() -> float:
    if resource is None:
        return 0.0
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    return float(peak if sys.platform == "darwin" else peak * 1024)


def _runtime_values() -> dict[str, float]:
    stats = gc.get_stats()
    collections = sum(gen["collections"] for gen in stats)
    collected = sum(gen["collected"] for gen in stats)
    current, peak = tracemalloc.get_traced_memory()
    blocks = sys.getallocatedblocks()
    rss = _resident_bytes()
    cpu_ns = time.process_time_ns()
    pause = _gc_tracker.pause_total_ns
    return {
        "Alloc": current,
        "Frees": collected,
        "GCCPUFraction": pause / cpu_ns if cpu_ns else 0.0,
        "HeapAlloc": current,
        "HeapInuse": current,
        "HeapObjects": blocks,
        "HeapSys": rss,
        "LastGC": _gc_tracker.last_gc_ns,
        "Mallocs": blocks + collected,
        "NextGC": gc.get_threshold()[0],
        "NumGC": collections,
        "PauseTotalNs": pause,
        "Sys": rss,
        "TotalAlloc": peak,
    }


def read_metrics() -> list[Metrics]:
    """Return one sample of every runtime gauge, the poll counter and a random value."""
    values = _runtime_values()
    metrics = [
        Metrics(id=name, mtype=GAUGE, value=float(values.get(name, 0.0)))
        for name in GAUGE_NAMES
    ]
    metrics.append(Metrics(id="PollCount", mtype=COUNTER, delta=1))
    metrics.append(Metrics(id="RandomValue", mtype=GAUGE, value=random.random() * 100))
    return metrics


def _put(jobs: queue.Queue, metric: Metrics, stop_event: threading.Event) -> bool:
    while not stop_event.is_set():
        try:
            jobs.put(metric, timeout=_PUT_TIMEOUT)
        except queue.Full:
            continue
        return True
    return False


def collect_metrics(
    jobs: queue.Queue, stop_event: threading.Event, poll_interval: float
) -> threading.Thread:
    """Start a thread that puts a fresh sample into ``jobs`` every ``poll_interval`` seconds.

    The first sample is taken after one interval; setting ``stop_event`` ends the thread.
    """

    def loop() -> None:
        while not stop_event.wait(poll_interval):
            for metric in read_metrics():
                if not _put(jobs, metric, stop_event):
                    return

    thread = threading.Thread(target=loop, name="metrics-collector", daemon=True)
    thread.start()
    return thread