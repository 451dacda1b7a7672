"""Guards against metric and span instruments with unbounded attribute cardinality."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from telguard.attributes import KeyValue

HIGH_CARDINALITY_MESSAGE = "instrument has high cardinality for attribute"
TOO_MANY_INSTRUMENTS_MESSAGE = "detected a lot of instruments"


def _default_logger() -> logging.Logger:
    return logging.getLogger("telguard")


@dataclass
class CardinalityConfig:
    """Limits for attribute values per key and instruments per scope."""

    enable: bool = False
    max_cardinality: int = 100
    max_instruments: int = 500
    diagnostic_interval: float = 600.0
    logger: Callable[[], logging.Logger] = _default_logger


def _warn(config: CardinalityConfig, message: str, fields: dict[str, Any]) -> None:
    config.logger().warning(message, extra={"fields": fields})


class _Diagnostics:
    """Calls ``tick`` every ``interval`` seconds on a daemon thread until stopped."""

    def __init__(self, interval: float, tick: Callable[[], None]) -> None:
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(interval, tick), daemon=True
        )
        self._thread.start()

    def _run(self, interval: float, tick: Callable[[], None]) -> None:
        while not self._stop.wait(interval):
            tick()

    def stop(self) -> None:
        self._stop.set()


class NoopCardinalityDetector:
    """Accepts every attribute set, keeping only a count of the checks made."""

    def __init__(self) -> None:
        self.checks = 0
        self.closed = False

    def check_attrs(self, attrs: Iterable[KeyValue]) -> bool:
        """Admit the attributes unconditionally and count the check."""
        self.checks += 1
        return not self.closed or True

    def shutdown(self) -> None:
        """Mark the detector as shut down; it keeps admitting everything."""
        self.closed = True


_NOOP_DETECTOR = NoopCardinalityDetector()


class CardinalityDetector:
    """Tracks distinct values per attribute key and rejects keys over the limit."""

    def __init__(self, name: str, config: CardinalityConfig) -> None:
        self.name = name
        self.config = config
        self._attrs: dict[str, set[str]] = {}
        self._high: dict[str, None] = {}
        self._lock = threading.Lock()
        self._closed = False
        self._diagnostics = (
            _Diagnostics(config.diagnostic_interval, self._report)
            if config.diagnostic_interval > 0
            else None
        )

    def _report(self) -> None:
        with self._lock:
            size = len(self._attrs)
            high = list(self._high)
        for attr in high:
            _warn(
                self.config,
                HIGH_CARDINALITY_MESSAGE,
                {
                    "instrument_name": self.name,
                    "attribute_name": attr,
                    "max_cardinality": self.config.max_cardinality,
                    "attributes_size": size,
                },
            )

    def _check(self, key: str, value: str) -> tuple[bool, dict[str, Any] | None]:
        values = self._attrs.get(key)
        if values is None:
            self._attrs[key] = {value}
            return True, None
        if value in values:
            return True, None
        if key in self._high:
            return False, None
        if len(values) < self.config.max_cardinality:
            values.add(value)
            return True, None
        self._high[key] = None
        return False, {
            "instrument_name": self.name,
            "attribute_name": key,
            "max_cardinality": self.config.max_cardinality,
            "attributes_size": len(self._attrs),
            "last_value": value,
        }

    def check_attrs(self, attrs: Iterable[KeyValue]) -> bool:
        """True if every attribute stays within the cardinality limit."""
        ok = True
        details = None
        with self._lock:
            for attr in attrs:
                ok, details = self._check(attr.key, attr.value.emit())
                if not ok:
                    break
        if details:
            _warn(self.config, HIGH_CARDINALITY_MESSAGE, details)
        return ok

    def shutdown(self) -> None:
        """Stop periodic diagnostics; safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._diagnostics is not None:
                self._diagnostics.stop()


def new_detector(
    name: str, config: CardinalityConfig | None
) -> CardinalityDetector | NoopCardinalityDetector:
    """A detector for ``name``, or a no-op one when detection is off."""
    if config is None or not config.enable or config.max_cardinality <= 0:
        return _NOOP_DETECTOR
    return CardinalityDetector(name, config)


class NoopCardinalityDetectorPool:
    """Hands out the no-op detector for every name, counting the lookups."""

    def __init__(self, detector: NoopCardinalityDetector = _NOOP_DETECTOR) -> None:
        self._detector = detector
        self.lookups = 0

    def lookup(self, name: str) -> NoopCardinalityDetector:
        """The shared no-op detector, whatever the name."""
        self.lookups += 1
        return self._detector

    def shutdown(self) -> None:
        """Shut the shared no-op detector down."""
        self._detector.shutdown()


_NOOP_POOL = NoopCardinalityDetectorPool()


class CardinalityDetectorPool:
    """One detector per instrument name, up to a limit on instrument count."""

    def __init__(self, instrumentation_name: str, config: CardinalityConfig) -> None:
        self.instrumentation_name = instrumentation_name
        self.config = config
        self._detectors: dict[str, CardinalityDetector | NoopCardinalityDetector] = {}
        self._names: set[str] = set()
        self._limit_detected = False
        self._closed = False
        self._lock = threading.Lock()
        self._diagnostics = (
            _Diagnostics(config.diagnostic_interval, self._report)
            if config.diagnostic_interval > 0
            else None
        )

    def _report(self) -> None:
        with self._lock:
            detected = self._limit_detected
        if detected:
            _warn(
                self.config,
                TOO_MANY_INSTRUMENTS_MESSAGE,
                {
                    "instrumentation_name": self.instrumentation_name,
                    "instruments_size": self.config.max_instruments,
                },
            )

    def lookup(self, name: str) -> CardinalityDetector | NoopCardinalityDetector | None:
        """The detector for ``name``, or None once the instrument limit is reached."""
        details = None
        detector_name = f"{self.instrumentation_name}/{name}"
        with self._lock:
            known = name in self._names
            if self._limit_detected and not known:
                return None
            detector = self._detectors.get(detector_name)
            if detector is None:
                detector = new_detector(detector_name, self.config)
                self._detectors[detector_name] = detector
                if not self._limit_detected:
                    self._names.add(name)
                    if len(self._names) >= self.config.max_instruments:
                        self._limit_detected = True
                        details = {
                            "instrumentation_name": self.instrumentation_name,
                            "instruments_size": self.config.max_instruments,
                            "last_value": name,
                        }
        if details:
            _warn(self.config, TOO_MANY_INSTRUMENTS_MESSAGE, details)
        return detector

    def shutdown(self) -> None:
        """Stop diagnostics and shut every detector down; idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._diagnostics is not None:
                self._diagnostics.stop()
            detectors = list(self._detectors.values())
        for detector in detectors:
            detector.shutdown()


def new_pool(
    instrumentation_name: str, config: CardinalityConfig | None
) -> CardinalityDetectorPool | NoopCardinalityDetectorPool:
    """A detector pool, or a no-op one when detection is off."""
    if config is None or not config.enable or config.max_instruments <= 0:
        return _NOOP_POOL
    return CardinalityDetectorPool(instrumentation_name, config)