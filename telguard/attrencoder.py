"""Encoding of log entries and structured fields into attributes."""

from __future__ import annotations

import base64
import dataclasses
import enum
import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from telguard.attributes import (
    KeyValue,
    _format_float,
    bool_attr,
    float_attr,
    int_attr,
    string_attr,
)

CALLER_KEY = "_caller"
STACKTRACE_KEY = "stack"
MSG_KEY = "msg"


class Level(enum.IntEnum):
    DEBUG = -1
    INFO = 0
    WARN = 1
    ERROR = 2
    DPANIC = 3
    PANIC = 4
    FATAL = 5


@dataclass(frozen=True)
class Caller:
    """Source location that produced a log entry."""

    defined: bool = False
    file: str = ""
    line: int = 0

    def trimmed_path(self) -> str:
        """The last directory and file name with the line number."""
        if not self.defined:
            return "undefined"
        full = f"{self.file}:{self.line}"
        idx = self.file.rfind("/")
        if idx == -1:
            return full
        idx = self.file.rfind("/", 0, idx)
        if idx == -1:
            return full
        return f"{self.file[idx + 1:]}:{self.line}"


@dataclass(frozen=True)
class Entry:
    """A single log event."""

    level: Level = Level.INFO
    message: str = ""
    time: datetime | None = None
    logger_name: str = ""
    caller: Caller = Caller()
    stack: str = ""


@dataclass(frozen=True)
class Field:
    """A structured log field; ``kind`` selects the encoder method."""

    key: str
    kind: str
    value: Any

    def add_to(self, encoder: "AttrEncoder") -> None:
        getattr(encoder, f"add_{self.kind}")(self.key, self.value)


def string_field(key: str, value: str) -> Field:
    return Field(key, "string", value)


def binary_field(key: str, value: bytes) -> Field:
    return Field(key, "binary", bytes(value))


def byte_string_field(key: str, value: bytes) -> Field:
    return Field(key, "byte_string", bytes(value))


def bool_field(key: str, value: bool) -> Field:
    return Field(key, "bool", value)


def int_field(key: str, value: int) -> Field:
    return Field(key, "int", value)


def float_field(key: str, value: float) -> Field:
    return Field(key, "float", value)


def complex_field(key: str, value: complex) -> Field:
    return Field(key, "complex", value)


def duration_field(key: str, value: timedelta | int) -> Field:
    return Field(key, "duration", value)


def time_field(key: str, value: datetime) -> Field:
    return Field(key, "time", value)


def any_field(key: str, value: Any) -> Field:
    """Pick the field kind from the value's type."""
    if isinstance(value, bool):
        return bool_field(key, value)
    if isinstance(value, int):
        return int_field(key, value)
    if isinstance(value, float):
        return float_field(key, value)
    if isinstance(value, complex):
        return complex_field(key, value)
    if isinstance(value, str):
        return string_field(key, value)
    if isinstance(value, (bytes, bytearray)):
        return binary_field(key, value)
    if isinstance(value, timedelta):
        return duration_field(key, value)
    if isinstance(value, datetime):
        return time_field(key, value)
    return Field(key, "reflected", value)


def _to_nanoseconds(value: timedelta | int) -> int:
    if isinstance(value, timedelta):
        return (value.days * 86400 + value.seconds) * 10**9 + value.microseconds * 1000
    return int(value)


def _with_fraction(amount: int, precision: int) -> str:
    whole, fraction = divmod(amount, 10**precision)
    digits = f"{fraction:0{precision}d}".rstrip("0")
    return f"{whole}.{digits}" if digits else str(whole)


def format_duration(value: timedelta | int) -> str:
    """Render a duration (timedelta or nanoseconds) like ``1h2m3.5s``."""
    ns = _to_nanoseconds(value)
    if ns == 0:
        return "0s"
    negative = ns < 0
    u = abs(ns)

    if u < 10**9:
        if u < 10**3:
            text = f"{u}ns"
        elif u < 10**6:
            text = _with_fraction(u, 3) + "\u00b5s"
        else:
            text = _with_fraction(u, 6) + "ms"
    else:
        minute = 60 * 10**9
        text = _with_fraction(u % minute, 9) + "s"
        minutes = u // minute
        if minutes:
            hours, minutes = divmod(minutes, 60)
            text = f"{minutes}m{text}"
            if hours:
                text = f"{hours}h{text}"

    return f"-{text}" if negative else text


def _format_rfc3339(value: datetime) -> str:
    """RFC 3339 with second precision; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    offset = value.utcoffset() or timedelta(0)
    base = value.strftime("%Y-%m-%dT%H:%M:%S")
    if offset == timedelta(0):
        return base + "Z"
    total = int(offset.total_seconds()) // 60
    sign = "-" if total < 0 else "+"
    hours, minutes = divmod(abs(total), 60)
    return f"{base}{sign}{hours:02d}:{minutes:02d}"


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonable(value[k]) for k in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if not f.name.startswith("_")
        }
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if hasattr(value, "__dict__"):
        return {k: _jsonable(v) for k, v in vars(value).items() if not k.startswith("_")}
    return value


class AttrEncoder:
    """Collects fields as a list of attributes."""

    def __init__(self, *attrs: KeyValue) -> None:
        self.attrs: list[KeyValue] = list(attrs)
        self.namespaces: list[str] = []

    def clone(self) -> "AttrEncoder":
        return AttrEncoder(*self.attrs)

    def encode_entry(self, entry: Entry, fields: Iterable[Field]) -> list[KeyValue]:
        """Attributes for an entry: caller, stack, message, then fields."""
        encoder = self.clone()
        if entry.caller.defined:
            encoder.add_string(CALLER_KEY, entry.caller.trimmed_path())
        if entry.stack:
            encoder.add_string(STACKTRACE_KEY, entry.stack)
        encoder.add_string(MSG_KEY, entry.message)
        for item in fields:
            item.add_to(encoder)
        return encoder.attrs

    def add_array(self, key: str, value: Any) -> None:
        self.attrs.append(string_attr(key, str(value)))

    def add_object(self, key: str, value: Any) -> None:
        self.attrs.append(string_attr(key, str(value)))

    def add_binary(self, key: str, value: bytes) -> None:
        self.attrs.append(string_attr(key, base64.b64encode(bytes(value)).decode("ascii")))

    def add_byte_string(self, key: str, value: bytes) -> None:
        self.attrs.append(string_attr(key, bytes(value).decode("utf-8", errors="replace")))

    def add_bool(self, key: str, value: bool) -> None:
        self.attrs.append(bool_attr(key, value))

    def add_complex(self, key: str, value: complex) -> None:
        value = complex(value)
        imag = _format_float(value.imag)
        if imag[0] not in "+-":
            imag = "+" + imag
        self.attrs.append(string_attr(key, f"({_format_float(value.real)}{imag}i)"))

    def add_duration(self, key: str, value: timedelta | int) -> None:
        self.attrs.append(string_attr(key, format_duration(value)))

    def add_float(self, key: str, value: float) -> None:
        self.attrs.append(float_attr(key, value))

    def add_int(self, key: str, value: int) -> None:
        self.attrs.append(int_attr(key, value))

    def add_string(self, key: str, value: str) -> None:
        self.attrs.append(string_attr(key, value))

    def add_time(self, key: str, value: datetime) -> None:
        self.attrs.append(string_attr(key, _format_rfc3339(value)))

    def add_reflected(self, key: str, value: Any) -> None:
        """JSON-encode an arbitrary value; raises if it cannot be encoded."""
        text = json.dumps(
            _jsonable(value), ensure_ascii=False, separators=(",", ":"), allow_nan=False
        )
        self.attrs.append(string_attr(key, text))

    def open_namespace(self, key: str) -> None:
        """Remember the namespace; attributes stay flat and keep their keys."""
        self.namespaces.append(key)