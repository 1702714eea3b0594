from collections import deque

import pytest

from tallymetrics.m3.v1_values import CountValue, GaugeValue, MetricValue, TimerValue
from tallymetrics.m3.wire import TType, UnionError


class Tape:
    """Records protocol writes and replays them as reads."""

    def __init__(self, events=()):
        self.events = deque(events)

    # writing
    def write_struct_begin(self, name):
        self.events.append(("struct_begin", name))

    def write_struct_end(self):
        self.events.append(("struct_end",))

    def write_field_begin(self, name, ttype, field_id):
        self.events.append(("field_begin", name, ttype, field_id))

    def write_field_end(self):
        self.events.append(("field_end",))

    def write_field_stop(self):
        self.events.append(("field_begin", None, TType.STOP, 0))

    def write_i64(self, value):
        self.events.append(("i64", value))

    def write_double(self, value):
        self.events.append(("double", value))

    # reading
    def _take(self, kind):
        event = self.events.popleft()
        assert event[0] == kind, (event, kind)
        return event[1:]

    def read_struct_begin(self):
        return self._take("struct_begin")[0]

    def read_struct_end(self):
        self._take("struct_end")

    def read_field_begin(self):
        return self._take("field_begin")

    def read_field_end(self):
        self._take("field_end")

    def read_i64(self):
        return self._take("i64")[0]

    def read_double(self):
        return self._take("double")[0]

    def read_string(self):
        return self._take("string")[0]


def roundtrip(value):
    tape = Tape()
    value.write(tape)
    result = type(value).read(tape)
    assert not tape.events
    return result


def test_count_value_wire_events():
    tape = Tape()
    CountValue(i64_value=5).write(tape)
    assert list(tape.events) == [
        ("struct_begin", "CountValue"),
        ("field_begin", "i64Value", TType.I64, 1),
        ("i64", 5),
        ("field_end",),
        ("field_begin", None, TType.STOP, 0),
        ("struct_end",),
    ]


def test_gauge_double_uses_field_two():
    tape = Tape()
    GaugeValue(d_value=1.5).write(tape)
    assert ("field_begin", "dValue", TType.DOUBLE, 2) in tape.events
    assert ("struct_begin", "GaugeValue") == tape.events[0]


@pytest.mark.parametrize(
    "value",
    [
        CountValue(i64_value=42),
        CountValue(i64_value=-7),
        GaugeValue(i64_value=3),
        GaugeValue(d_value=42.0),
        TimerValue(i64_value=126_000_000),
        TimerValue(d_value=0.25),
    ],
)
def test_simple_roundtrip(value):
    assert roundtrip(value) == value


@pytest.mark.parametrize(
    "value",
    [
        MetricValue(count=CountValue(i64_value=84)),
        MetricValue(gauge=GaugeValue(d_value=42.0)),
        MetricValue(timer=TimerValue(i64_value=3)),
    ],
)
def test_metric_value_roundtrip(value):
    assert roundtrip(value) == value


def test_count_set_fields():
    assert CountValue().count_set_fields() == 0
    assert GaugeValue(i64_value=1, d_value=2.0).count_set_fields() == 2
    assert TimerValue(d_value=2.0).count_set_fields() == 1
    assert (
        MetricValue(
            count=CountValue(i64_value=1), timer=TimerValue(i64_value=1)
        ).count_set_fields()
        == 2
    )


def test_empty_union_rejected_without_writing():
    tape = Tape()
    with pytest.raises(UnionError) as info:
        CountValue().write(tape)
    assert info.value.count == 0
    assert not tape.events


def test_two_fields_rejected():
    with pytest.raises(UnionError) as info:
        GaugeValue(i64_value=1, d_value=1.0).write(Tape())
    assert info.value.count == 2
    assert "exactly one field must be set" in str(info.value)


def test_metric_value_with_two_values_rejected():
    value = MetricValue(count=CountValue(i64_value=1), gauge=GaugeValue(i64_value=1))
    with pytest.raises(UnionError) as info:
        value.write(Tape())
    assert info.value.type_name == "MetricValue"


def test_invalid_nested_value_rejected():
    with pytest.raises(UnionError) as info:
        MetricValue(timer=TimerValue()).write(Tape())
    assert info.value.type_name == "TimerValue"


def test_read_skips_unknown_fields():
    tape = Tape(
        [
            ("struct_begin", "CountValue"),
            ("field_begin", "extra", TType.STRING, 9),
            ("string", "ignored"),
            ("field_end",),
            ("field_begin", "i64Value", TType.I64, 1),
            ("i64", 11),
            ("field_end",),
            ("field_begin", None, TType.STOP, 0),
            ("struct_end",),
        ]
    )
    assert CountValue.read(tape) == CountValue(i64_value=11)
    assert not tape.events


def test_read_empty_struct_leaves_fields_unset():
    tape = Tape(
        [
            ("struct_begin", "MetricValue"),
            ("field_begin", None, TType.STOP, 0),
            ("struct_end",),
        ]
    )
    result = MetricValue.read(tape)
    assert result == MetricValue()
    assert result.count_set_fields() == 0