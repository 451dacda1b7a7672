"""A meter provider whose instruments drop measurements with runaway attribute cardinality."""

from __future__ import annotations

import threading
from typing import Any

from telguard.attributes import KeyValue
from telguard.cardinality import CardinalityConfig, new_pool
from telguard.tracetransform import Scope

LIMIT_EXCEEDED_MESSAGE = "limit exceeded cardinality detector"


class LimitExceededError(Exception):
    """Raised when a scope already holds as many instruments as allowed."""

    def __init__(self, message: str = LIMIT_EXCEEDED_MESSAGE) -> None:
        super().__init__(message)


class GuardedInstrument:
    """Forwards measurements to a delegate only while attributes stay within limits."""

    def __init__(self, delegate: Any, detector: Any) -> None:
        self.delegate = delegate
        self.detector = detector

    def _admitted(self, attrs: tuple[KeyValue, ...]) -> bool:
        return self.detector.check_attrs(attrs)

    def observe(self, ctx: Any, value: Any, *args: KeyValue) -> None:
        if self._admitted(args):
            self.delegate.observe(ctx, value, *args)

    def add(self, ctx: Any, value: Any, *args: KeyValue) -> None:
        if self._admitted(args):
            self.delegate.add(ctx, value, *args)

    def record(self, ctx: Any, value: Any, *args: KeyValue) -> None:
        if self._admitted(args):
            self.delegate.record(ctx, value, *args)


class GuardedInstrumentProvider:
    """Wraps each instrument a delegate provider creates with a cardinality detector."""

    def __init__(self, delegate: Any, pool: Any) -> None:
        self.delegate = delegate
        self.pool = pool

    def _guard(self, instrument: Any, name: str) -> GuardedInstrument:
        detector = self.pool.lookup(name)
        if detector is None:
            raise LimitExceededError()
        return GuardedInstrument(instrument, detector)

    def counter(self, name: str, *args: Any) -> GuardedInstrument:
        return self._guard(self.delegate.counter(name, *args), name)

    def up_down_counter(self, name: str, *args: Any) -> GuardedInstrument:
        return self._guard(self.delegate.up_down_counter(name, *args), name)

    def gauge(self, name: str, *args: Any) -> GuardedInstrument:
        return self._guard(self.delegate.gauge(name, *args), name)

    def histogram(self, name: str, *args: Any) -> GuardedInstrument:
        return self._guard(self.delegate.histogram(name, *args), name)


class CardinalityMeter:
    """A meter whose instrument namespaces share one detector pool."""

    def __init__(self, delegate: Any, pool: Any) -> None:
        self.delegate = delegate
        self.pool = pool

    def async_float64(self) -> GuardedInstrumentProvider:
        return GuardedInstrumentProvider(self.delegate.async_float64(), self.pool)

    def async_int64(self) -> GuardedInstrumentProvider:
        return GuardedInstrumentProvider(self.delegate.async_int64(), self.pool)

    def sync_float64(self) -> GuardedInstrumentProvider:
        return GuardedInstrumentProvider(self.delegate.sync_float64(), self.pool)

    def sync_int64(self) -> GuardedInstrumentProvider:
        return GuardedInstrumentProvider(self.delegate.sync_int64(), self.pool)

    def shutdown(self) -> None:
        self.pool.shutdown()


class MeterProvider:
    """Caches one guarded meter per instrumentation scope."""

    def __init__(self, delegate: Any, cardinality_config: CardinalityConfig | None = None) -> None:
        self.delegate = delegate
        self.cardinality_config = cardinality_config
        self._meters: dict[Scope, CardinalityMeter] = {}
        self._lock = threading.Lock()

    def meter(self, name: str, version: str = "", schema_url: str = "") -> CardinalityMeter:
        scope = Scope(name=name, version=version, schema_url=schema_url)
        with self._lock:
            existing = self._meters.get(scope)
            if existing is not None:
                return existing
            meter = CardinalityMeter(
                self.delegate.meter(name, version, schema_url),
                new_pool(name, self.cardinality_config),
            )
            self._meters[scope] = meter
            return meter

    def shutdown(self) -> Any:
        """Shut down every meter, then the delegate; returns the delegate's result."""
        with self._lock:
            for meter in self._meters.values():
                meter.shutdown()
            return self.delegate.shutdown()