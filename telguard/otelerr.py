"""Routes errors and log calls from the telemetry SDK into a Python logger."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from telguard.attrencoder import Field, string_field

COMPONENT = "component"
COMPONENT_NAME = "otel"


def conv(values: Sequence[Any]) -> list[Field]:
    """Pair up keys and values, keeping only pairs where both are strings."""
    pairs = zip(values[0::2], values[1::2])
    return [
        string_field(key, value)
        for key, value in pairs
        if isinstance(key, str) and isinstance(value, str)
    ]


class OtelErrorLogger:
    """Error handler and structured log sink bound to a set of fields."""

    def __init__(self, logger: logging.Logger, fields: Iterable[Field] | None = None) -> None:
        self.logger = logger
        self.fields: tuple[Field, ...] = (
            (string_field(COMPONENT, COMPONENT_NAME),) if fields is None else tuple(fields)
        )
        self.runtime_info: Any = None

    def _log(self, level: int, msg: str, extra: Iterable[Field] = ()) -> None:
        fields = {f.key: f.value for f in (*self.fields, *extra)}
        self.logger.log(level, msg, extra={"fields": fields})

    def handle(self, err: BaseException) -> None:
        self._log(logging.ERROR, "otel", [string_field("error", str(err))])

    def init(self, info: Any) -> None:
        """Keep the runtime information handed over by the SDK."""
        self.runtime_info = info

    def enabled(self, level: int) -> bool:
        """Every verbosity level passes unless the underlying logger is disabled."""
        return not self.logger.disabled

    def info(self, level: int, msg: str, *args: Any) -> None:
        self._log(logging.INFO, msg, conv(args))

    def error(self, err: BaseException, msg: str, *args: Any) -> None:
        self._log(logging.ERROR, msg, [*conv(args), string_field("error", str(err))])

    def with_values(self, *args: Any) -> "OtelErrorLogger":
        return OtelErrorLogger(self.logger, (*self.fields, *conv(args)))

    def with_name(self, name: str) -> "OtelErrorLogger":
        return OtelErrorLogger(self.logger, (*self.fields, string_field("name", name)))