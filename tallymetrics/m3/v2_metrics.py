"""Metrics and metric batches of the version 2 M3 wire format."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from tallymetrics.m3.v1_values import _read_struct, _write_struct
from tallymetrics.m3.v2_values import MetricTag, MetricType, MetricValue, _require
from tallymetrics.m3.wire import TType, _check_size


def _write_tag_list(oprot: Any, tags: Sequence[MetricTag]) -> None:
    oprot.write_list_begin(TType.STRUCT, len(tags))
    for tag in tags:
        tag.write(oprot)
    oprot.write_list_end()


def _read_tag_list(iprot: Any) -> list[MetricTag]:
    _, size = iprot.read_list_begin()
    _check_size(size)
    tags = [MetricTag.read(iprot) for _ in range(size)]
    iprot.read_list_end()
    return tags


@dataclass
class Metric:
    """A single emitted metric; name, value and timestamp are required."""

    name: str = ""
    value: MetricValue = field(default_factory=MetricValue)
    timestamp: int = 0
    tags: list[MetricTag] | None = None

    def __post_init__(self) -> None:
        if self.tags is not None:
            self.tags = list(self.tags)

    def is_set_value(self) -> bool:
        """True when the value differs from the all-zero default."""
        value = self.value
        return (
            value.metric_type != MetricType.INVALID
            or value.count != 0
            or value.gauge != 0
            or value.timer != 0
        )

    def write(self, oprot: Any) -> None:
        _write_struct(
            oprot,
            "Metric",
            [
                ("name", TType.STRING, 1, self.name, oprot.write_string),
                (
                    "value",
                    TType.STRUCT,
                    2,
                    self.value,
                    lambda value: value.write(oprot),
                ),
                ("timestamp", TType.I64, 3, int(self.timestamp), oprot.write_i64),
                (
                    "tags",
                    TType.LIST,
                    4,
                    self.tags,
                    lambda tags: _write_tag_list(oprot, tags),
                ),
            ],
        )

    @classmethod
    def read(cls, iprot: Any) -> Metric:
        values: dict[str, Any] = {}

        def read_name(p: Any) -> None:
            values["name"] = p.read_string()

        def read_value(p: Any) -> None:
            values["value"] = MetricValue.read(p)

        def read_timestamp(p: Any) -> None:
            values["timestamp"] = p.read_i64()

        def read_tags(p: Any) -> None:
            values["tags"] = _read_tag_list(p)

        _read_struct(
            iprot, {1: read_name, 2: read_value, 3: read_timestamp, 4: read_tags}
        )
        _require(
            values, {"name": "Name", "value": "Value", "timestamp": "Timestamp"}
        )
        return cls(**values)


@dataclass
class MetricBatch:
    """A group of metrics sharing common tags; the metric list is required."""

    metrics: list[Metric] = field(default_factory=list)
    common_tags: list[MetricTag] | None = None

    def __post_init__(self) -> None:
        self.metrics = list(self.metrics)
        if self.common_tags is not None:
            self.common_tags = list(self.common_tags)

    def _write_metrics(self, oprot: Any) -> None:
        oprot.write_list_begin(TType.STRUCT, len(self.metrics))
        for metric in self.metrics:
            metric.write(oprot)
        oprot.write_list_end()

    def write(self, oprot: Any) -> None:
        _write_struct(
            oprot,
            "MetricBatch",
            [
                (
                    "metrics",
                    TType.LIST,
                    1,
                    self.metrics,
                    lambda _: self._write_metrics(oprot),
                ),
                (
                    "commonTags",
                    TType.LIST,
                    2,
                    self.common_tags,
                    lambda tags: _write_tag_list(oprot, tags),
                ),
            ],
        )

    @classmethod
    def read(cls, iprot: Any) -> MetricBatch:
        values: dict[str, Any] = {}

        def read_metrics(p: Any) -> None:
            _, size = p.read_list_begin()
            _check_size(size)
            values["metrics"] = [Metric.read(p) for _ in range(size)]
            p.read_list_end()

        def read_common_tags(p: Any) -> None:
            values["common_tags"] = _read_tag_list(p)

        _read_struct(iprot, {1: read_metrics, 2: read_common_tags})
        _require(values, {"metrics": "Metrics"})
        return cls(**values)