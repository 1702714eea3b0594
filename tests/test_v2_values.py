from collections import deque

import pytest

from tallymetrics.m3.v2_values import MetricTag, MetricType, MetricValue
from tallymetrics.m3.wire import ProtocolError, TType


class RecordingProtocol:
    def __init__(self):
        self.events = []

    def write_struct_begin(self, name):
        self.events.append(("struct_begin", name))

    def write_struct_end(self):
        self.events.append(("struct_end",))

    def write_field_begin(self, name, ttype, field_id):
        self.events.append(("field", name, ttype, field_id))

    def write_field_end(self):
        self.events.append(("field_end",))

    def write_field_stop(self):
        self.events.append(("stop",))

    def write_i32(self, value):
        self.events.append(("i32", value))

    def write_i64(self, value):
        self.events.append(("i64", value))

    def write_double(self, value):
        self.events.append(("double", value))

    def write_string(self, value):
        self.events.append(("string", value))


class ReplayProtocol:
    def __init__(self, events):
        self._events = deque(events)

    def _take(self, kind):
        event = self._events.popleft()
        assert event[0] == kind, (event, kind)
        return event

    def read_struct_begin(self):
        return self._take("struct_begin")[1]

    def read_struct_end(self):
        self._take("struct_end")

    def read_field_begin(self):
        event = self._events.popleft()
        if event[0] == "stop":
            return "", TType.STOP, 0
        assert event[0] == "field"
        return event[1], event[2], event[3]

    def read_field_end(self):
        self._take("field_end")

    def read_i32(self):
        return self._take("i32")[1]

    def read_i64(self):
        return self._take("i64")[1]

    def read_double(self):
        return self._take("double")[1]

    def read_string(self):
        return self._take("string")[1]

    @property
    def remaining(self):
        return len(self._events)


def write_events(obj):
    proto = RecordingProtocol()
    obj.write(proto)
    return proto.events


def drop_field(events, field_id):
    out = []
    skipping = False
    for event in events:
        if event[0] == "field" and event[3] == field_id:
            skipping = True
            continue
        if skipping:
            if event[0] == "field_end":
                skipping = False
            continue
        out.append(event)
    return out


@pytest.mark.parametrize(
    "text, expected",
    [
        ("INVALID", MetricType.INVALID),
        ("COUNTER", MetricType.COUNTER),
        ("GAUGE", MetricType.GAUGE),
        ("TIMER", MetricType.TIMER),
    ],
)
def test_metric_type_from_string(text, expected):
    assert MetricType.from_string(text) is expected
    assert str(expected) == text


def test_metric_type_from_string_rejects_unknown():
    with pytest.raises(ValueError, match="not a valid MetricType string"):
        MetricType.from_string("HISTOGRAM")


@pytest.mark.parametrize(
    "text, wire_value",
    [("INVALID", 0), ("COUNTER", 1), ("GAUGE", 2), ("TIMER", 3)],
)
def test_metric_type_wire_values(text, wire_value):
    value = MetricValue(MetricType.from_string(text))
    assert write_events(value)[2] == ("i32", wire_value)


def test_metric_value_write_emits_all_fields_in_order():
    value = MetricValue(MetricType.GAUGE, count=0, gauge=1.5, timer=0)
    assert write_events(value) == [
        ("struct_begin", "MetricValue"),
        ("field", "metricType", TType.I32, 1),
        ("i32", 2),
        ("field_end",),
        ("field", "count", TType.I64, 2),
        ("i64", 0),
        ("field_end",),
        ("field", "gauge", TType.DOUBLE, 3),
        ("double", 1.5),
        ("field_end",),
        ("field", "timer", TType.I64, 4),
        ("i64", 0),
        ("field_end",),
        ("stop",),
        ("struct_end",),
    ]


@pytest.mark.parametrize(
    "value",
    [
        MetricValue(MetricType.COUNTER, count=42),
        MetricValue(MetricType.GAUGE, gauge=42.0),
        MetricValue(MetricType.TIMER, timer=126_000_000),
        MetricValue(),
    ],
)
def test_metric_value_round_trip(value):
    proto = ReplayProtocol(write_events(value))
    assert MetricValue.read(proto) == value
    assert proto.remaining == 0


def test_metric_value_read_keeps_metric_type_enum():
    events = write_events(MetricValue(MetricType.TIMER, timer=9))
    result = MetricValue.read(ReplayProtocol(events))
    assert result.metric_type is MetricType.TIMER


def test_metric_value_read_preserves_unknown_metric_type():
    events = write_events(MetricValue(7))
    assert MetricValue.read(ReplayProtocol(events)).metric_type == 7


@pytest.mark.parametrize(
    "field_id, label",
    [(1, "MetricType"), (2, "Count"), (3, "Gauge"), (4, "Timer")],
)
def test_metric_value_missing_required_field(field_id, label):
    events = drop_field(write_events(MetricValue(MetricType.COUNTER, count=1)), field_id)
    with pytest.raises(ProtocolError, match=f"Required field {label} is not set") as info:
        MetricValue.read(ReplayProtocol(events))
    assert info.value.type_id == ProtocolError.INVALID_DATA


def test_metric_value_skips_unknown_fields():
    events = write_events(MetricValue(MetricType.COUNTER, count=5))
    extra = [("field", "extra", TType.STRING, 9), ("string", "ignored"), ("field_end",)]
    events = events[:1] + extra + events[1:]
    proto = ReplayProtocol(events)
    assert MetricValue.read(proto) == MetricValue(MetricType.COUNTER, count=5)
    assert proto.remaining == 0


def test_metric_tag_write_events():
    assert write_events(MetricTag("env", "prod")) == [
        ("struct_begin", "MetricTag"),
        ("field", "name", TType.STRING, 1),
        ("string", "env"),
        ("field_end",),
        ("field", "value", TType.STRING, 2),
        ("string", "prod"),
        ("field_end",),
        ("stop",),
        ("struct_end",),
    ]


def test_metric_tag_round_trip():
    tag = MetricTag("service", "api")
    proto = ReplayProtocol(write_events(tag))
    assert MetricTag.read(proto) == tag
    assert proto.remaining == 0


def test_metric_tag_empty_strings_still_round_trip():
    tag = MetricTag()
    assert MetricTag.read(ReplayProtocol(write_events(tag))) == tag


@pytest.mark.parametrize("field_id, label", [(1, "Name"), (2, "Value")])
def test_metric_tag_missing_required_field(field_id, label):
    events = drop_field(write_events(MetricTag("a", "b")), field_id)
    with pytest.raises(ProtocolError, match=f"Required field {label} is not set"):
        MetricTag.read(ReplayProtocol(events))


def test_metric_tags_are_hashable_and_compare_by_value():
    tags = {MetricTag("a", "b"), MetricTag("a", "b"), MetricTag("a", "c")}
    assert len(tags) == 2