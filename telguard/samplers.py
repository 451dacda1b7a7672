"""Trace samplers, including one that always keeps spans marked as errors."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass

from telguard.attributes import KeyValue, _format_float

ERROR_ATTRIBUTE_KEY = "error"


class SamplingDecision(enum.Enum):
    DROP = 0
    RECORD_ONLY = 1
    RECORD_AND_SAMPLE = 2


@dataclass(frozen=True)
class Link:
    trace_id: bytes = bytes(16)
    span_id: bytes = bytes(8)
    attributes: tuple[KeyValue, ...] = ()


@dataclass(frozen=True)
class SamplingParameters:
    trace_id: bytes
    name: str = ""
    attributes: tuple[KeyValue, ...] = ()
    links: tuple[Link, ...] = ()
    parent_trace_state: str = ""


@dataclass(frozen=True)
class SamplingResult:
    decision: SamplingDecision
    attributes: tuple[KeyValue, ...] = ()
    trace_state: str = ""


class TraceIdRatioSampler:
    """Samples a fraction of traces, decided from the trace ID's low 8 bytes."""

    def __init__(self, fraction: float) -> None:
        self._always = fraction >= 1
        if fraction <= 0:
            fraction = 0.0
        self._upper_bound = int(fraction * (1 << 63))
        self._description = (
            "AlwaysOnSampler" if self._always else f"TraceIDRatioBased{{{_format_float(fraction)}}}"
        )

    def should_sample(self, params: SamplingParameters) -> SamplingResult:
        if len(params.trace_id) != 16:
            raise ValueError("trace id must be 16 bytes")
        if self._always:
            decision = SamplingDecision.RECORD_AND_SAMPLE
        else:
            x = int.from_bytes(params.trace_id[8:16], "big") >> 1
            decision = (
                SamplingDecision.RECORD_AND_SAMPLE
                if x < self._upper_bound
                else SamplingDecision.DROP
            )
        return SamplingResult(decision, trace_state=params.parent_trace_state)

    def description(self) -> str:
        return self._description


def _has_error(attrs) -> bool:
    return any(kv.key == ERROR_ATTRIBUTE_KEY for kv in attrs)


class StatusTraceIdRatioSampler:
    """Ratio sampling that always samples spans carrying an ``error`` attribute."""

    def __init__(self, fraction: float) -> None:
        self._inner = TraceIdRatioSampler(fraction)
        self._description = f"StatusTraceIDRatioBased{{{_format_float(fraction)}}}"

    def should_sample(self, params: SamplingParameters) -> SamplingResult:
        result = self._inner.should_sample(params)
        if _has_error(params.attributes) or any(
            _has_error(link.attributes) for link in params.links
        ):
            return dataclasses.replace(result, decision=SamplingDecision.RECORD_AND_SAMPLE)
        return result

    def description(self) -> str:
        return self._description


def status_trace_id_ratio_based(fraction: float) -> StatusTraceIdRatioSampler:
    return StatusTraceIdRatioSampler(fraction)