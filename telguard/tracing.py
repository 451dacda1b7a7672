"""A tracer provider that refuses new span names past an instrument limit."""

from __future__ import annotations

import threading
from typing import Any

from telguard.cardinality import CardinalityConfig, new_pool
from telguard.tracetransform import Scope


class NonRecordingSpan:
    """A span that records nothing."""

    trace_id = bytes(16)
    span_id = bytes(8)

    def __init__(self) -> None:
        self.ended = False

    def is_recording(self) -> bool:
        return False

    def end(self) -> None:
        """Mark the span as ended; nothing is exported."""
        self.ended = True


class CardinalityTracer:
    """Starts spans through a delegate tracer while the span name is admitted."""

    def __init__(self, delegate: Any, pool: Any) -> None:
        self.delegate = delegate
        self.pool = pool

    def start(self, span_name: str, *args: Any, **kwargs: Any) -> Any:
        """The delegate's span, or a non-recording span for a refused name."""
        if self.pool.lookup(span_name) is not None:
            return self.delegate.start(span_name, *args, **kwargs)
        return NonRecordingSpan()

    def shutdown(self) -> None:
        self.pool.shutdown()


class TracerProvider:
    """Caches one guarded tracer per instrumentation scope."""

    def __init__(self, delegate: Any, cardinality_config: CardinalityConfig | None = None) -> None:
        self.delegate = delegate
        self.cardinality_config = cardinality_config
        self._tracers: dict[Scope, CardinalityTracer] = {}
        self._lock = threading.Lock()

    def tracer(self, name: str, version: str = "", schema_url: str = "") -> CardinalityTracer:
        scope = Scope(name=name, version=version, schema_url=schema_url)
        with self._lock:
            existing = self._tracers.get(scope)
            if existing is not None:
                return existing
            tracer = CardinalityTracer(
                self.delegate.tracer(name, version=version, schema_url=schema_url),
                new_pool(name, self.cardinality_config),
            )
            self._tracers[scope] = tracer
            return tracer

    def shutdown(self) -> Any:
        """Shut down every tracer, then the delegate; returns the delegate's result."""
        with self._lock:
            for tracer in self._tracers.values():
                tracer.shutdown()
            return self.delegate.shutdown()