# tallymetrics

Building blocks for emitting metrics: an object pool, reporters that fan out
to several other reporters, UDP transports that send buffered writes as single
packets, and the M3 metric structs (versions 1 and 2) with their wire
encoding and decoding.

The package has no dependencies outside the standard library.

## Install

```
pip install tallymetrics
```

## Modules

### `tallymetrics.pool`

`ObjectPool(size)` holds up to `size` objects. A negative size raises
`ValueError`.

- `init(alloc)` stores the allocator and fills the pool to capacity.
- `get()` takes a pooled object. If the pool is empty, it calls the allocator
  instead. It raises `RuntimeError` when the pool is empty and `init` has not
  been called.
- `put(obj)` returns an object to the pool. The object is dropped when the pool
  is full.

The pool is thread-safe.

### `tallymetrics.multi`

- `MultiReporter(*reporters)` passes `report_counter`, `report_gauge`,
  `report_timer`, `report_histogram_value_samples` and
  `report_histogram_duration_samples` on to each reporter, in order.
- `MultiCachedReporter(*reporters)` has `allocate_counter`, `allocate_gauge`,
  `allocate_timer` and `allocate_histogram`. Each returns a `MultiMetric` that
  forwards `report_count`, `report_gauge` and `report_timer` to the metric each
  reporter allocated. Its `value_bucket` and `duration_bucket` return a
  `MultiHistogramBucket`, whose `report_samples` reaches every underlying bucket.
- On both reporters, `capabilities()` returns a `Capabilities(reporting, tagging)`
  value. Each flag is true only if it is true for every reporter.
  `flush()` flushes every reporter.

Reporters are duck-typed. Any object that has the methods being called will
do:

```python
from datetime import timedelta
from tallymetrics.multi import MultiReporter

class PrintReporter:
    def report_counter(self, name, tags, value):
        print("counter", name, tags, value)
    def report_timer(self, name, tags, interval):
        print("timer", name, tags, interval)
    def flush(self):
        pass

reporter = MultiReporter(PrintReporter(), PrintReporter())
reporter.report_counter("requests", {"service": "api"}, 1)
reporter.report_timer("latency", {"service": "api"}, timedelta(milliseconds=126))
reporter.flush()
```

### `tallymetrics.thriftudp.transport`

`UDPTransport` buffers writes and sends the whole buffer as one datagram on
`flush()`. The buffer is cleared even when the send fails.

- `UDPTransport.client(dest_host_port, loc_host_port="")` connects to a
  `host:port` destination. If a local address is given, the socket is bound to
  it first.
- `UDPTransport.server(host_port)` binds to an address and receives packets
  on it.
- `write(data)` and `write_string(text)` append to the buffer and return the
  number of bytes appended. `write_string` encodes the text as UTF-8.
  `write_byte(value)` appends a single byte. The buffer can hold at most
  `MAX_LENGTH` (65000) bytes. A write that would go past this limit raises
  `TransportError` of kind `INVALID_DATA`.
- `read(size)` receives one packet and returns at most `size` bytes of it.
  `read_byte()` returns the first byte of the next packet. An empty packet
  raises `TransportError` of kind `PROTOCOL_ERROR`.
- `remaining_bytes()` returns `2**64 - 1`, because the amount left is unknown.
- `open()` only checks that the transport is usable, since the socket is opened
  when the transport is created. `is_open()` reports whether the transport is
  still open.
- `close()` may be called more than once. It raises `OSError` if the socket
  was already closed directly through `conn`.
- Once the transport is closed, `read`, `read_byte`, `write`, `write_byte`,
  `write_string` and `flush` raise `TransportError` of kind `NOT_OPEN`. An
  address that cannot be resolved or bound also raises `TransportError` of
  kind `NOT_OPEN`.
- The `addr` property gives the destination or bound address as `host:port`.
  `conn` is the underlying socket. `buffered` is the number of bytes waiting to
  be flushed.
- Transports are context managers that close on exit.

```python
from tallymetrics.thriftudp.transport import UDPTransport

with UDPTransport.server("127.0.0.1:0") as server:
    with UDPTransport.client(server.addr) as client:
        client.write(b"test")
        client.write_string("string")
        client.flush()
    print(server.read(20))  # b'teststring'
```

### `tallymetrics.thriftudp.multitransport`

`MultiUDPTransport(transports)` passes `open`, `close`, `write` and `flush`
on to every transport it holds.

- `is_open()` is true only if every transport is open.
- `write` returns the largest byte count that any transport reported.
- `read` raises `TransportError`. `remaining_bytes()` returns 0.
- `MultiUDPTransport.client(dest_host_ports, loc_host_port="")` creates one
  `UDPTransport` client for each destination. If one of them fails, the clients
  already created are closed.

### `tallymetrics.m3`

- `wire` holds the `TType` type identifiers, `ProtocolError` and `UnionError`.
  It also has `skip_struct(iprot)`, which reads and discards a whole struct,
  with a nesting limit.
- `v1_values` holds the union types `CountValue`, `GaugeValue`, `TimerValue`
  and `MetricValue`. Each has `count_set_fields()`. `write` raises `UnionError`
  unless exactly one field is set.
- `v1_metrics` holds `MetricTag`, `Metric` and `MetricBatch`. Tags are held
  as frozensets.
- `v2_values` holds `MetricType`, with `MetricType.from_string`, which raises
  `ValueError` for an unknown name. It also holds `MetricValue` and `MetricTag`.
- `v2_metrics` holds `Metric`, with `is_set_value()`, and `MetricBatch`.

Every struct has `write(oprot)` and a class method `read(iprot)`. Unknown
fields are skipped when reading. In version 2, a required field missing on
read raises `ProtocolError`.

## What this package does not do

- It contains no Thrift protocol (binary, compact or otherwise). The M3
  structs' `write` and `read` take a protocol object that you supply. That
  object must provide methods such as `write_struct_begin`,
  `write_field_begin`, `write_i64`, `read_field_begin` and `read_string`.
- It has no M3 client or service processor. Nothing here sends a metric
  batch over a transport on its own.
- It has no metric scopes, counters or timers that aggregate values. There
  are no built-in reporters beyond the fan-out reporters above.
- It provides no command-line program.

## Tests

```
pip install -e ".[test]"
pytest
```