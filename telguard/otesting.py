"""Counting fakes of a meter provider, meters and instruments for tests."""

from __future__ import annotations

from typing import Any, Callable


class CountingFloatInstrument:
    """Counts every observation, addition or recording."""

    def __init__(self) -> None:
        self.count = 0

    def observe(self, ctx: Any, value: float, *args: Any) -> None:
        self.count += 1

    def add(self, ctx: Any, value: float, *args: Any) -> None:
        self.count += 1

    def record(self, ctx: Any, value: float, *args: Any) -> None:
        self.count += 1


class CountingIntInstrument:
    """Counts every observation, addition or recording."""

    def __init__(self) -> None:
        self.count = 0

    def observe(self, ctx: Any, value: int, *args: Any) -> None:
        self.count += 1

    def add(self, ctx: Any, value: int, *args: Any) -> None:
        self.count += 1

    def record(self, ctx: Any, value: int, *args: Any) -> None:
        self.count += 1


class FakeAsyncFloatProvider:
    def counter(self, name: str, *args: Any) -> CountingFloatInstrument:
        return CountingFloatInstrument()

    def up_down_counter(self, name: str, *args: Any) -> CountingFloatInstrument:
        return CountingFloatInstrument()

    def gauge(self, name: str, *args: Any) -> CountingFloatInstrument:
        return CountingFloatInstrument()


class FakeAsyncIntProvider:
    def counter(self, name: str, *args: Any) -> CountingIntInstrument:
        return CountingIntInstrument()

    def up_down_counter(self, name: str, *args: Any) -> CountingIntInstrument:
        return CountingIntInstrument()

    def gauge(self, name: str, *args: Any) -> CountingIntInstrument:
        return CountingIntInstrument()


class FakeSyncFloatProvider:
    def counter(self, name: str, *args: Any) -> CountingFloatInstrument:
        return CountingFloatInstrument()

    def up_down_counter(self, name: str, *args: Any) -> CountingFloatInstrument:
        return CountingFloatInstrument()

    def histogram(self, name: str, *args: Any) -> CountingFloatInstrument:
        return CountingFloatInstrument()


class FakeSyncIntProvider:
    def counter(self, name: str, *args: Any) -> CountingIntInstrument:
        return CountingIntInstrument()

    def up_down_counter(self, name: str, *args: Any) -> CountingIntInstrument:
        return CountingIntInstrument()

    def histogram(self, name: str, *args: Any) -> CountingIntInstrument:
        return CountingIntInstrument()


class FakeMeter:
    """Counts how often each instrument namespace is requested."""

    def __init__(self) -> None:
        self.af_count = 0
        self.ai_count = 0
        self.sf_count = 0
        self.si_count = 0
        self.callbacks: list[Callable[[Any], None]] = []

    def async_int64(self) -> FakeAsyncIntProvider:
        self.ai_count += 1
        return FakeAsyncIntProvider()

    def async_float64(self) -> FakeAsyncFloatProvider:
        self.af_count += 1
        return FakeAsyncFloatProvider()

    def register_callback(self, instruments: Any, function: Callable[[Any], None]) -> None:
        self.callbacks.append(function)

    def sync_int64(self) -> FakeSyncIntProvider:
        self.si_count += 1
        return FakeSyncIntProvider()

    def sync_float64(self) -> FakeSyncFloatProvider:
        self.sf_count += 1
        return FakeSyncFloatProvider()

    def collect(self) -> None:
        """Run every registered callback."""
        for function in self.callbacks:
            function(None)


class FakeMeterProvider:
    """Counts meter requests and hands out a fresh meter each time."""

    def __init__(self) -> None:
        self.count = 0

    def meter(self, name: str, *args: Any) -> FakeMeter:
        self.count += 1
        return FakeMeter()


def meter_provider() -> FakeMeterProvider:
    return FakeMeterProvider()