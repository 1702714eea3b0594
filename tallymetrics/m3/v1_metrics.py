"""Tags, metrics and metric batches of the version 1 M3 wire format."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from tallymetrics.m3.v1_values import MetricValue, _read_struct, _write_struct
from tallymetrics.m3.wire import TType, _check_size


@dataclass(frozen=True)
class MetricTag:
    """A tag applied to a metric; the value is optional."""

    tag_name: str = ""
    tag_value: str | None = None

    def write(self, oprot: Any) -> None:
        _write_struct(
            oprot,
            "MetricTag",
            [
                ("tagName", TType.STRING, 1, self.tag_name, oprot.write_string),
                ("tagValue", TType.STRING, 2, self.tag_value, oprot.write_string),
            ],
        )

    @classmethod
    def read(cls, iprot: Any) -> MetricTag:
        values: dict[str, Any] = {}

        def read_name(p: Any) -> None:
            values["tag_name"] = p.read_string()

        def read_value(p: Any) -> None:
            values["tag_value"] = p.read_string()

        _read_struct(iprot, {1: read_name, 2: read_value})
        return cls(**values)


def _as_tag_set(tags: Iterable[MetricTag] | None) -> frozenset[MetricTag] | None:
    return None if tags is None else frozenset(tags)


def _write_tag_set(oprot: Any, tags: frozenset[MetricTag]) -> None:
    oprot.write_set_begin(TType.STRUCT, len(tags))
    for tag in tags:
        tag.write(oprot)
    oprot.write_set_end()


def _read_tag_set(iprot: Any) -> frozenset[MetricTag]:
    _, size = iprot.read_set_begin()
    _check_size(size)
    tags = [MetricTag.read(iprot) for _ in range(size)]
    iprot.read_set_end()
    return frozenset(tags)


@dataclass
class Metric:
    """A single emitted metric."""

    name: str = ""
    metric_value: MetricValue | None = None
    timestamp: int | None = None
    tags: frozenset[MetricTag] | None = None

    def __post_init__(self) -> None:
        self.tags = _as_tag_set(self.tags)

    def write(self, oprot: Any) -> None:
        _write_struct(
            oprot,
            "Metric",
            [
                ("name", TType.STRING, 1, self.name, oprot.write_string),
                (
                    "metricValue",
                    TType.STRUCT,
                    2,
                    self.metric_value,
                    lambda value: value.write(oprot),
                ),
                ("timestamp", TType.I64, 3, self.timestamp, oprot.write_i64),
                (
                    "tags",
                    TType.SET,
                    4,
                    self.tags,
                    lambda tags: _write_tag_set(oprot, tags),
                ),
            ],
        )

    @classmethod
    def read(cls, iprot: Any) -> Metric:
        result = cls()

        def read_name(p: Any) -> None:
            result.name = p.read_string()

        def read_value(p: Any) -> None:
            result.metric_value = MetricValue.read(p)

        def read_timestamp(p: Any) -> None:
            result.timestamp = p.read_i64()

        def read_tags(p: Any) -> None:
            result.tags = _read_tag_set(p)

        _read_struct(
            iprot, {1: read_name, 2: read_value, 3: read_timestamp, 4: read_tags}
        )
        return result


@dataclass
class MetricBatch:
    """A group of metrics sharing common tags such as cluster and service."""

    metrics: list[Metric] = field(default_factory=list)
    common_tags: frozenset[MetricTag] | None = None

    def __post_init__(self) -> None:
        self.metrics = list(self.metrics)
        self.common_tags = _as_tag_set(self.common_tags)

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
                    TType.SET,
                    2,
                    self.common_tags,
                    lambda tags: _write_tag_set(oprot, tags),
                ),
            ],
        )

    @classmethod
    def read(cls, iprot: Any) -> MetricBatch:
        result = cls()

        def read_metrics(p: Any) -> None:
            _, size = p.read_list_begin()
            _check_size(size)
            result.metrics = [Metric.read(p) for _ in range(size)]
            p.read_list_end()

        def read_common_tags(p: Any) -> None:
            result.common_tags = _read_tag_set(p)

        _read_struct(iprot, {1: read_metrics, 2: read_common_tags})
        return result