# telguard

Building blocks for telemetry pipelines, with no third-party dependencies.

- **Attributes and OTLP transforms**: `telguard.attributes` provides typed
  key/value attributes (`string_attr`, `int_attr`, `float_attr`, `bool_attr`
  and the `*_slice_attr` variants). `Value.emit()` renders any attribute value
  as text. `telguard.tracetransform` converts attributes into OTLP-shaped
  values (`key_values`, `key_value`, `to_any_value`). It converts a `Resource`
  with `to_resource` and a `Scope` with `instrumentation_scope`.
- **Log-to-attribute encoding**: `telguard.attrencoder.AttrEncoder.encode_entry`
  turns an `Entry` and its `Field`s into a flat list of attributes. The list
  starts with the caller, then the stack and the message, and the fields follow.
  Build fields with `string_field`, `binary_field` (base64), `duration_field`,
  `time_field` (RFC 3339), `any_field` and the other helpers. `any_field` falls
  back to JSON for values that have no kind of their own.
- **Span log core**: `telguard.ztrace.TraceCore` mirrors log entries onto a
  span. It can copy fields as attributes and the message as an event. An
  error-level entry sets `error=true` and an error status on the span.
- **ID generation**: `telguard.idgen.CryptoIdGenerator` produces 16-byte trace
  IDs and 8-byte span IDs from the operating system's random source.
- **Sampling**: `telguard.samplers.status_trace_id_ratio_based(fraction)`
  samples by trace-ID ratio. It always keeps a span that carries an `error`
  attribute, either on the span itself or on one of its links.
- **Cardinality guards**: `telguard.cardinality` tracks how many distinct
  values each attribute key has. It also tracks how many instruments each scope
  has, and it refuses anything past the limits in `CardinalityConfig`. When a
  limit is reached, it logs a warning through the configured `logging` logger.
  It can also repeat those warnings periodically on a background thread.
- **Guarded providers**: `telguard.tracing.TracerProvider` and
  `telguard.metering.MeterProvider` wrap a delegate provider and cache one
  guarded tracer or meter per scope.
  - Once a tracer's span-name limit is reached, a new span name gets a
    `NonRecordingSpan`.
  - A new instrument past a meter's limit raises `LimitExceededError`.
  - A measurement whose attributes go past the cardinality limit is dropped.
- **Adapters**: `telguard.otelerr.OtelErrorLogger` and
  `telguard.grpcerr.GrpcLogger` route library diagnostics into a
  `logging.Logger`. The structured fields go in `extra={"fields": ...}`.
  `GrpcLogger` behaves as follows:
  - It logs info calls at debug level.
  - It raises warnings to error level.
  - Its `fatal*` methods log critical and raise `SystemExit(1)`.
- **Test doubles**: `telguard.otesting.meter_provider()` returns a fake meter
  provider. Its meters and instruments count how often they are called.

## Installation

```
pip install telguard
```

## Example: attributes to OTLP

```python
from telguard.attributes import int_attr, string_attr
from telguard.tracetransform import key_values

for kv in key_values([int_attr("answer", 42), string_attr("name", "demo")]):
    print(kv.key, kv.value.kind, kv.value.value)
```

## Example: limiting attribute cardinality

```python
from telguard.attributes import string_attr
from telguard.cardinality import CardinalityConfig, new_detector

config = CardinalityConfig(enable=True, max_cardinality=2, diagnostic_interval=0)
detector = new_detector("requests", config)

detector.check_attrs([string_attr("user", "a")])  # True
detector.check_attrs([string_attr("user", "b")])  # True
detector.check_attrs([string_attr("user", "c")])  # False: limit reached
detector.shutdown()
```

If `enable` is false, `new_detector` and `new_pool` return no-op objects, and
those objects admit everything.

## Example: guarded metrics

```python
from telguard.cardinality import CardinalityConfig
from telguard.metering import MeterProvider
from telguard.otesting import meter_provider

config = CardinalityConfig(enable=True, diagnostic_interval=0)
provider = MeterProvider(meter_provider(), config)
meter = provider.meter("service", "1.0", "")
counter = meter.sync_int64().counter("hits")
counter.add(None, 1)
meter.shutdown()
```

`MeterProvider.shutdown()` shuts down every meter and then calls `shutdown()`
on the delegate. The delegate must provide that method; the fake meter
provider from `telguard.otesting` does not, which is why the example shuts
down the meter instead.

`TracerProvider` expects a delegate with two methods:
`tracer(name, version=..., schema_url=...)` and `shutdown()`. The tracers that
delegate returns must have a `start(span_name, ...)` method.

## What this package does not do

telguard has no tracing or metrics SDK of its own and no exporters. Nothing is
sent over the network. The guarded providers only wrap objects that you supply.
It has no command-line interface.

## Running the tests

```
pip install -e ".[test]"
pytest
```