"""Parsing of metric data carried in request paths."""

from __future__ import annotations

import math
import re

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer syntax: {text!r}")
    number = int(text)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return number


def _parse_float(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"invalid float syntax: {text!r}")
    try:
        number = float(text)
    except ValueError:
        raise ValueError(f"invalid float syntax: {text!r}") from None
    if math.isinf(number) and "inf" not in text.lower():
        raise ValueError(f"float out of range: {text!r}")
    return number


def get_metric_data_from_uri(url: str) -> tuple[str, int | float]:
    """Return ``(key, value)`` from a path like ``/update/<type>/<key>/<value>``.

    Counters yield an ``int`` and gauges a ``float``.
    """
    parts = url.split("/")
    if len(parts) < 5:
        raise ValueError("incorrect data has been provided")
    metric_type, metric_key, metric_value = parts[2], parts[3], parts[4]

    if metric_key == "":
        raise ValueError("provide metric's key")

    if metric_type == "counter":
        return metric_key, _parse_int(metric_value)
    if metric_type == "gauge":
        return metric_key, _parse_float(metric_value)
    raise ValueError("incorrect metric type was providen")


def get_metric_key_from_url(url: str) -> str:
    """Return the key from a path like ``/value/<type>/<key>``."""
    parts = url.split("/")
    if len(parts) != 4:
        raise ValueError("incorrect data has been provided")
    return parts[3]