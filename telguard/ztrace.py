"""A log core that mirrors log entries onto a trace span."""

from __future__ import annotations

import enum
from typing import Iterable, Protocol

from telguard.attrencoder import AttrEncoder, Entry, Field, Level
from telguard.attributes import KeyValue, bool_attr

SPAN_KEY = "span"
ERROR_STATUS_DESCRIPTION = "error_mark"


class StatusCode(enum.Enum):
    UNSET = 0
    ERROR = 1
    OK = 2


class _Span(Protocol):
    def is_recording(self) -> bool: ...

    def set_attributes(self, attrs: list[KeyValue]) -> None: ...

    def add_event(self, name: str) -> None: ...

    def set_status(self, code: StatusCode, description: str) -> None: ...


class TraceCore:
    """Writes log entries to a span as attributes, events and error status."""

    def __init__(
        self,
        level: Level,
        span: _Span,
        *,
        track_log_fields: bool = False,
        track_log_message: bool = False,
        encoder: AttrEncoder | None = None,
    ) -> None:
        self.level = level
        self.span = span
        self.track_log_fields = track_log_fields
        self.track_log_message = track_log_message
        self.encoder = encoder if encoder is not None else AttrEncoder()

    def _clone(self) -> "TraceCore":
        return TraceCore(
            self.level,
            self.span,
            track_log_fields=self.track_log_fields,
            track_log_message=self.track_log_message,
            encoder=self.encoder.clone(),
        )

    def with_fields(self, fields: Iterable[Field]) -> "TraceCore":
        """A copy of this core; the fields are added to this core's encoder."""
        clone = self._clone()
        for item in fields:
            if item.key == SPAN_KEY:
                continue
            item.add_to(self.encoder)
        return clone

    def write(self, entry: Entry, fields: Iterable[Field]) -> None:
        if not self.span.is_recording():
            return
        if self.track_log_fields:
            self.span.set_attributes(self.encoder.encode_entry(entry, fields))
        if self.track_log_message:
            self.span.add_event(entry.message)
        if entry.level == Level.ERROR:
            self.span.set_attributes([bool_attr("error", True)])
            self.span.set_status(StatusCode.ERROR, ERROR_STATUS_DESCRIPTION)

    def check(self, entry: Entry) -> "TraceCore | None":
        """This core if it accepts the entry's level, otherwise None."""
        return self if self.enabled(entry.level) else None

    def sync(self) -> bool:
        """Nothing is buffered; reports whether the span still accepts writes."""
        return bool(self.span.is_recording())

    def enabled(self, level: Level) -> bool:
        return level >= self.level