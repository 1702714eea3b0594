"""Metric types, values and tags of the version 2 M3 wire format."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from tallymetrics.m3.v1_values import _read_struct, _write_struct
from tallymetrics.m3.wire import ProtocolError, TType


class MetricType(IntEnum):
    """The kind of value a version 2 metric carries."""

    INVALID = 0
    COUNTER = 1
    GAUGE = 2
    TIMER = 3

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_string(cls, text: str) -> MetricType:
        """Parse a metric type from its name."""
        try:
            return cls[text]
        except KeyError:
            raise ValueError("not a valid MetricType string") from None


def _metric_type_from_wire(value: int) -> MetricType | int:
    """Map a wire integer to a MetricType, keeping unknown values as they are."""
    try:
        return MetricType(value)
    except ValueError:
        return value


def _require(present: dict[str, Any], fields: dict[str, str]) -> None:
    """Raise if any required field, by attribute, was not read."""
    for attr, label in fields.items():
        if attr not in present:
            raise ProtocolError(
                f"Required field {label} is not set", ProtocolError.INVALID_DATA
            )


@dataclass(frozen=True)
class MetricValue:
    """The value of a metric; all four fields are required on the wire."""

    metric_type: MetricType | int = MetricType.INVALID
    count: int = 0
    gauge: float = 0.0
    timer: int = 0

    def write(self, oprot: Any) -> None:
        _write_struct(
            oprot,
            "MetricValue",
            [
                (
                    "metricType",
                    TType.I32,
                    1,
                    int(self.metric_type),
                    oprot.write_i32,
                ),
                ("count", TType.I64, 2, int(self.count), oprot.write_i64),
                ("gauge", TType.DOUBLE, 3, float(self.gauge), oprot.write_double),
                ("timer", TType.I64, 4, int(self.timer), oprot.write_i64),
            ],
        )

    @classmethod
    def read(cls, iprot: Any) -> MetricValue:
        values: dict[str, Any] = {}

        def read_type(p: Any) -> None:
            values["metric_type"] = _metric_type_from_wire(p.read_i32())

        def read_count(p: Any) -> None:
            values["count"] = p.read_i64()

        def read_gauge(p: Any) -> None:
            values["gauge"] = p.read_double()

        def read_timer(p: Any) -> None:
            values["timer"] = p.read_i64()

        _read_struct(
            iprot, {1: read_type, 2: read_count, 3: read_gauge, 4: read_timer}
        )
        _require(
            values,
            {
                "metric_type": "MetricType",
                "count": "Count",
                "gauge": "Gauge",
                "timer": "Timer",
            },
        )
        return cls(**values)


@dataclass(frozen=True)
class MetricTag:
    """A name and value pair applied to a metric; both are required."""

    name: str = ""
    value: str = ""

    def write(self, oprot: Any) -> None:
        _write_struct(
            oprot,
            "MetricTag",
            [
                ("name", TType.STRING, 1, self.name, oprot.write_string),
                ("value", TType.STRING, 2, self.value, oprot.write_string),
            ],
        )

    @classmethod
    def read(cls, iprot: Any) -> MetricTag:
        values: dict[str, Any] = {}

        def read_name(p: Any) -> None:
            values["name"] = p.read_string()

        def read_value(p: Any) -> None:
            values["value"] = p.read_string()

        _read_struct(iprot, {1: read_name, 2: read_value})
        _require(values, {"name": "Name", "value": "Value"})
        return cls(**values)