"""Wire model for a single metric as exchanged over JSON."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass
class Metrics:
    """A gauge or counter metric; ``delta`` is for counters, ``value`` for gauges."""

    id: str = ""
    mtype: str = ""
    delta: int | None = None
    value: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form, leaving out unset ``delta`` and ``value``."""
        data: dict[str, Any] = {"id": self.id, "type": self.mtype}
        if self.delta is not None:
            data["delta"] = self.delta
        if self.value is not None:
            data["value"] = self.value
        return data

    def to_json(self) -> str:
        """Return the compact JSON encoding."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: Any) -> Metrics:
        """Build a metric from a decoded JSON object, checking field types."""
        if not isinstance(data, Mapping):
            raise ValueError("metric must be a JSON object")

        metric_id = data.get("id", "")
        if not isinstance(metric_id, str):
            raise ValueError("field 'id' must be a string")

        mtype = data.get("type", "")
        if not isinstance(mtype, str):
            raise ValueError("field 'type' must be a string")

        delta = data.get("delta")
        if delta is not None and (isinstance(delta, bool) or not isinstance(delta, int)):
            raise ValueError("field 'delta' must be an integer")

        value = data.get("value")
        if value is not None:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError("field 'value' must be a number")
            value = float(value)

        return cls(id=metric_id, mtype=mtype, delta=delta, value=value)