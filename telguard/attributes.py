"""Typed attribute key-value pairs used across telemetry signals."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable


class Type(enum.Enum):
    """Kind of value an attribute carries."""

    INVALID = 0
    BOOL = 1
    INT64 = 2
    FLOAT64 = 3
    STRING = 4
    BOOLSLICE = 5
    INT64SLICE = 6
    FLOAT64SLICE = 7
    STRINGSLICE = 8


def _format_float(value: float) -> str:
    """Shortest textual form of a float, exponent form outside [1e-4, 1e6)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    point = len(digits) + exponent - 1

    if point < -4 or point >= 6:
        mantissa = digits[0] + (f".{digits[1:]}" if len(digits) > 1 else "")
        exp_sign = "-" if point < 0 else "+"
        text = f"{mantissa}e{exp_sign}{abs(point):02d}"
    elif point >= 0:
        whole = digits[: point + 1].ljust(point + 1, "0")
        fraction = digits[point + 1 :]
        text = whole + (f".{fraction}" if fraction else "")
    else:
        text = "0." + "0" * (-point - 1) + digits

    return f"-{text}" if sign else text


@dataclass(frozen=True)
class Value:
    """A typed attribute value; slices are stored as tuples."""

    type: Type = Type.INVALID
    value: Any = None

    def emit(self) -> str:
        """Render the value as a string."""
        kind = self.type
        if kind is Type.BOOL:
            return str(bool(self.value)).lower()
        if kind is Type.INT64:
            return str(self.value)
        if kind is Type.FLOAT64:
            return _format_float(self.value)
        if kind is Type.STRING:
            return self.value
        if kind is Type.BOOLSLICE:
            return "[" + " ".join(str(bool(v)).lower() for v in self.value) + "]"
        if kind is Type.INT64SLICE:
            return "[" + " ".join(str(v) for v in self.value) + "]"
        if kind is Type.FLOAT64SLICE:
            return "[" + " ".join(_format_float(v) for v in self.value) + "]"
        if kind is Type.STRINGSLICE:
            return "[" + " ".join(self.value) + "]"
        return "unknown"


@dataclass(frozen=True)
class KeyValue:
    """An attribute: a key with a typed value."""

    key: str
    value: Value = Value()


def string_attr(key: str, value: str) -> KeyValue:
    return KeyValue(key, Value(Type.STRING, str(value)))


def bool_attr(key: str, value: bool) -> KeyValue:
    return KeyValue(key, Value(Type.BOOL, bool(value)))


def int_attr(key: str, value: int) -> KeyValue:
    return KeyValue(key, Value(Type.INT64, int(value)))


def float_attr(key: str, value: float) -> KeyValue:
    return KeyValue(key, Value(Type.FLOAT64, float(value)))


def bool_slice_attr(key: str, values: Iterable[bool]) -> KeyValue:
    return KeyValue(key, Value(Type.BOOLSLICE, tuple(bool(v) for v in values)))


def int_slice_attr(key: str, values: Iterable[int]) -> KeyValue:
    return KeyValue(key, Value(Type.INT64SLICE, tuple(int(v) for v in values)))


def float_slice_attr(key: str, values: Iterable[float]) -> KeyValue:
    return KeyValue(key, Value(Type.FLOAT64SLICE, tuple(float(v) for v in values)))


def string_slice_attr(key: str, values: Iterable[str]) -> KeyValue:
    return KeyValue(key, Value(Type.STRINGSLICE, tuple(str(v) for v in values)))