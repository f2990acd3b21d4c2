"""Metric storage interface and a thread-safe in-memory implementation."""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from os import PathLike
from typing import BinaryIO

log = logging.getLogger(__name__)


class MetricNotFoundError(LookupError):
    """Raised when a requested metric is not stored."""


class Storage(ABC):
    """Interface every metric store provides."""

    @abstractmethod
    def get_gauge(self, key: str) -> float:
        """Return the gauge stored under ``key``."""

    @abstractmethod
    def get_counter(self, key: str) -> int:
        """Return the counter stored under ``key``."""

    @abstractmethod
    def update_gauge(self, key: str, value: float) -> float:
        """Set a gauge and return the stored value."""

    @abstractmethod
    def update_counter(self, key: str, delta: int) -> int:
        """Add ``delta`` to a counter and return the new total."""

    @abstractmethod
    def get_all_metrics(self) -> tuple[dict[str, float], dict[str, int]]:
        """Return all gauges and all counters."""


class MemStorage(Storage):
    """Keeps metrics in dictionaries and can periodically save them to a file."""

    def __init__(self) -> None:
        self._gauge_lock = threading.Lock()
        self._counter_lock = threading.Lock()
        self._gauge: dict[str, float] = {}
        self._counter: dict[str, int] = {}
        self._save_thread: threading.Thread | None = None
        self._save_stop: threading.Event | None = None

    def get_gauge(self, key: str) -> float:
        with self._gauge_lock:
            try:
                return self._gauge[key]
            except KeyError:
                raise MetricNotFoundError("invalid metric") from None

    def get_counter(self, key: str) -> int:
        with self._counter_lock:
            try:
                return self._counter[key]
            except KeyError:
                raise MetricNotFoundError("invalid metric") from None

    def update_gauge(self, key: str, value: float) -> float:
        with self._gauge_lock:
            self._gauge[key] = value
            return value

    def update_counter(self, key: str, delta: int) -> int:
        with self._counter_lock:
            total = self._counter.get(key, 0) + delta
            self._counter[key] = total
            return total

    def get_all_metrics(self) -> tuple[dict[str, float], dict[str, int]]:
        with self._gauge_lock, self._counter_lock:
            return dict(self._gauge), dict(self._counter)

    def dump(self) -> bytes:
        """Return the stored metrics as a JSON document."""
        gauge, counter = self.get_all_metrics()
        return json.dumps(
            {"counter": counter, "gauge": gauge},
            sort_keys=True,
            separators=(",", ":"),
        ).encode()

    def enable_saves(self, dest: str | PathLike[str], interval: float) -> None:
        """Write the metrics to ``dest`` now and then every ``interval`` seconds."""
        self.stop_saves()
        fp = open(dest, "wb")
        stop = threading.Event()
        thread = threading.Thread(
            target=self._save_loop, args=(fp, interval, stop), daemon=True
        )
        self._save_stop = stop
        self._save_thread = thread
        thread.start()

    def stop_saves(self) -> None:
        """Stop periodic saving, if it is running."""
        if self._save_stop is None or self._save_thread is None:
            return
        self._save_stop.set()
        self._save_thread.join()
        self._save_stop = None
        self._save_thread = None

    def _save_loop(self, fp: BinaryIO, interval: float, stop: threading.Event) -> None:
        with fp:
            while True:
                data = self.dump()
                try:
                    fp.seek(0)
                    fp.truncate()
                    fp.write(data)
                    fp.flush()
                except OSError as exc:
                    log.info("Save metrics into file failure: %s", exc)
                else:
                    log.info("Metrics were saved into file, bytes written: %d", len(data))
                if stop.wait(interval):
                    return