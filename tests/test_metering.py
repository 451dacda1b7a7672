import logging

import pytest

from telguard.attributes import string_attr
from telguard.cardinality import CardinalityConfig
from telguard.metering import (
    CardinalityMeter,
    GuardedInstrument,
    GuardedInstrumentProvider,
    LimitExceededError,
    MeterProvider,
)
from telguard.otesting import FakeMeter, FakeMeterProvider


class _ClosableProvider(FakeMeterProvider):
    def __init__(self):
        super().__init__()
        self.closed = False

    def shutdown(self):
        self.closed = True
        return "done"


def _config(**kwargs):
    kwargs.setdefault("enable", True)
    kwargs.setdefault("diagnostic_interval", 0)
    return CardinalityConfig(**kwargs)


def test_counter_drops_values_past_cardinality_limit():
    provider = MeterProvider(_ClosableProvider(), _config(max_cardinality=2))
    counter = provider.meter("svc").sync_int64().counter("requests")
    for value in ("a", "b", "c", "a"):
        counter.add(None, 1, string_attr("route", value))
    assert counter.delegate.count == 3
    provider.shutdown()


def test_rejected_key_stays_rejected():
    provider = MeterProvider(_ClosableProvider(), _config(max_cardinality=1))
    hist = provider.meter("svc").sync_float64().histogram("latency")
    hist.record(None, 1.0, string_attr("k", "x"))
    hist.record(None, 1.0, string_attr("k", "y"))
    hist.record(None, 1.0, string_attr("k", "z"))
    assert hist.delegate.count == 1
    provider.shutdown()


def test_without_config_everything_passes():
    provider = MeterProvider(_ClosableProvider())
    gauge = provider.meter("svc").async_float64().gauge("temp")
    for i in range(5):
        gauge.observe(None, float(i), string_attr("id", str(i)))
    assert gauge.delegate.count == 5


def test_instrument_limit_raises():
    provider = MeterProvider(_ClosableProvider(), _config(max_instruments=2))
    ints = provider.meter("svc").sync_int64()
    ints.counter("one")
    ints.counter("two")
    with pytest.raises(LimitExceededError, match="limit exceeded cardinality detector"):
        ints.up_down_counter("three")
    again = ints.histogram("one")
    again.record(None, 3)
    assert again.delegate.count == 1
    provider.shutdown()


def test_meter_is_cached_per_scope():
    delegate = _ClosableProvider()
    provider = MeterProvider(delegate)
    first = provider.meter("svc")
    assert provider.meter("svc") is first
    assert provider.meter("svc", "1.0") is not first
    assert delegate.count == 2


def test_meter_namespaces_reach_delegate():
    provider = MeterProvider(_ClosableProvider())
    meter = provider.meter("svc")
    meter.async_int64()
    meter.async_int64()
    meter.sync_float64()
    assert meter.delegate.ai_count == 2
    assert meter.delegate.sf_count == 1
    assert meter.delegate.af_count == 0


def test_async_int_up_down_counter_observe():
    meter = CardinalityMeter(FakeMeter(), MeterProvider(_ClosableProvider()).meter("x").pool)
    instrument = meter.async_int64().up_down_counter("queue")
    instrument.observe(None, 4)
    instrument.observe(None, 5)
    assert isinstance(instrument, GuardedInstrument)
    assert instrument.delegate.count == 2


def test_provider_shutdown_returns_delegate_result():
    delegate = _ClosableProvider()
    provider = MeterProvider(delegate, _config())
    provider.meter("svc").sync_int64().counter("c")
    assert provider.shutdown() == "done"
    assert delegate.closed is True


def test_guarded_provider_uses_pool_lookup():
    class _RefusingPool:
        def lookup(self, name):
            return None

    provider = GuardedInstrumentProvider(FakeMeter().sync_int64(), _RefusingPool())
    with pytest.raises(LimitExceededError):
        provider.counter("anything")


def test_high_cardinality_is_logged(caplog):
    provider = MeterProvider(_ClosableProvider(), _config(max_cardinality=1))
    counter = provider.meter("svc").sync_float64().counter("hits")
    with caplog.at_level(logging.WARNING, logger="telguard"):
        counter.add(None, 1.0, string_attr("user", "u1"))
        counter.add(None, 1.0, string_attr("user", "u2"))
    assert "instrument has high cardinality for attribute" in caplog.text
    assert counter.delegate.count == 1
    provider.shutdown()