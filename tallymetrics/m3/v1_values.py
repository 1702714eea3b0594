"""Union value types carried by version 1 M3 metrics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from tallymetrics.m3.wire import MAX_SKIP_DEPTH, TType, UnionError, _skip

_FieldWriter = Callable[[Any], None]
_FieldReader = Callable[[Any], None]


def _write_struct(
    oprot: Any,
    struct_name: str,
    fields: Iterable[tuple[str, TType, int, Any, _FieldWriter]],
) -> None:
    """Write a struct, emitting only the fields whose value is set."""
    oprot.write_struct_begin(struct_name)
    for field_name, ttype, field_id, value, writer in fields:
        if value is None:
            continue
        oprot.write_field_begin(field_name, ttype, field_id)
        writer(value)
        oprot.write_field_end()
    oprot.write_field_stop()
    oprot.write_struct_end()


def _read_struct(iprot: Any, readers: Mapping[int, _FieldReader]) -> None:
    """Read a struct, dispatching known field ids and skipping the rest."""
    iprot.read_struct_begin()
    while True:
        _, field_type, field_id = iprot.read_field_begin()
        if field_type == TType.STOP:
            break
        reader = readers.get(field_id)
        if reader is not None:
            reader(iprot)
        else:
            _skip(iprot, field_type, MAX_SKIP_DEPTH)
        iprot.read_field_end()
    iprot.read_struct_end()


def _check_union(value: Any, count: int) -> None:
    if count != 1:
        raise UnionError(type(value).__name__, count)


@dataclass
class CountValue:
    """A count; exactly one representation must be set."""

    i64_value: int | None = None

    def count_set_fields(self) -> int:
        return int(self.i64_value is not None)

    def write(self, oprot: Any) -> None:
        _check_union(self, self.count_set_fields())
        _write_struct(
            oprot,
            "CountValue",
            [("i64Value", TType.I64, 1, self.i64_value, oprot.write_i64)],
        )

    @classmethod
    def read(cls, iprot: Any) -> CountValue:
        result = cls()

        def read_i64(p: Any) -> None:
            result.i64_value = p.read_i64()

        _read_struct(iprot, {1: read_i64})
        return result


@dataclass
class _NumericValue:
    i64_value: int | None = None
    d_value: float | None = None

    def count_set_fields(self) -> int:
        return sum(v is not None for v in (self.i64_value, self.d_value))

    def write(self, oprot: Any) -> None:
        _check_union(self, self.count_set_fields())
        _write_struct(
            oprot,
            type(self).__name__,
            [
                ("i64Value", TType.I64, 1, self.i64_value, oprot.write_i64),
                ("dValue", TType.DOUBLE, 2, self.d_value, oprot.write_double),
            ],
        )

    @classmethod
    def read(cls, iprot: Any) -> Any:
        result = cls()

        def read_i64(p: Any) -> None:
            result.i64_value = p.read_i64()

        def read_double(p: Any) -> None:
            result.d_value = p.read_double()

        _read_struct(iprot, {1: read_i64, 2: read_double})
        return result


@dataclass
class GaugeValue(_NumericValue):
    """A gauge reading, as an integer or a double; exactly one must be set."""

    def count_set_fields(self) -> int:
        return super().count_set_fields()

    def write(self, oprot: Any) -> None:
        super().write(oprot)

    @classmethod
    def read(cls, iprot: Any) -> GaugeValue:
        return super().read(iprot)


@dataclass
class TimerValue(_NumericValue):
    """A timer reading, as an integer or a double; exactly one must be set."""

    def count_set_fields(self) -> int:
        return super().count_set_fields()

    def write(self, oprot: Any) -> None:
        super().write(oprot)

    @classmethod
    def read(cls, iprot: Any) -> TimerValue:
        return super().read(iprot)


@dataclass
class MetricValue:
    """The value of a metric: exactly one of count, gauge or timer."""

    count: CountValue | None = None
    gauge: GaugeValue | None = None
    timer: TimerValue | None = None

    def count_set_fields(self) -> int:
        return sum(v is not None for v in (self.count, self.gauge, self.timer))

    def write(self, oprot: Any) -> None:
        _check_union(self, self.count_set_fields())

        def write_nested(value: Any) -> None:
            value.write(oprot)

        _write_struct(
            oprot,
            "MetricValue",
            [
                ("count", TType.STRUCT, 1, self.count, write_nested),
                ("gauge", TType.STRUCT, 2, self.gauge, write_nested),
                ("timer", TType.STRUCT, 3, self.timer, write_nested),
            ],
        )

    @classmethod
    def read(cls, iprot: Any) -> MetricValue:
        result = cls()

        def read_count(p: Any) -> None:
            result.count = CountValue.read(p)

        def read_gauge(p: Any) -> None:
            result.gauge = GaugeValue.read(p)

        def read_timer(p: Any) -> None:
            result.timer = TimerValue.read(p)

        _read_struct(iprot, {1: read_count, 2: read_gauge, 3: read_timer})
        return result