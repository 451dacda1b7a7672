from telguard.cardinality import CardinalityConfig
from telguard.tracing import NonRecordingSpan, TracerProvider


class FakeTracer:
    def __init__(self, name):
        self.name = name
        self.started = []

    def start(self, span_name, *args, **kwargs):
        self.started.append(span_name)
        return ("span", span_name)


class FakeProvider:
    def __init__(self):
        self.requests = []
        self.shutdowns = 0

    def tracer(self, name, version="", schema_url=""):
        self.requests.append((name, version, schema_url))
        return FakeTracer(name)

    def shutdown(self):
        self.shutdowns += 1
        return "done"


def limited_config(max_instruments):
    return CardinalityConfig(enable=True, max_instruments=max_instruments, diagnostic_interval=0)


def test_non_recording_span():
    span = NonRecordingSpan()
    assert span.is_recording() is False
    assert span.end() is None


def test_tracers_cached_per_scope():
    delegate = FakeProvider()
    provider = TracerProvider(delegate)
    first = provider.tracer("lib")
    assert provider.tracer("lib") is first
    other = provider.tracer("lib", version="2")
    assert other is not first
    assert delegate.requests == [("lib", "", ""), ("lib", "2", "")]


def test_disabled_detection_always_delegates():
    delegate = FakeProvider()
    tracer = TracerProvider(delegate).tracer("lib")
    for i in range(10):
        assert tracer.start(f"span-{i}") == ("span", f"span-{i}")


def test_new_names_refused_after_limit():
    delegate = FakeProvider()
    tracer = TracerProvider(delegate, limited_config(2)).tracer("lib")
    assert tracer.start("a") == ("span", "a")
    assert tracer.start("b") == ("span", "b")
    refused = tracer.start("c")
    assert isinstance(refused, NonRecordingSpan)
    assert tracer.start("a") == ("span", "a")
    assert tracer.delegate.started == ["a", "b", "a"]


def test_shutdown_reaches_delegate():
    delegate = FakeProvider()
    provider = TracerProvider(delegate, limited_config(5))
    provider.tracer("lib")
    provider.tracer("other")
    assert provider.shutdown() == "done"
    assert delegate.shutdowns == 1