"""A gRPC-style logger that forwards to a Python logger, demoting chatter."""

from __future__ import annotations

import logging
import re
from typing import Any

from telguard.attrencoder import string_field

COMPONENT = "component"
COMPONENT_NAME = "grpc"

_VERB = re.compile(r"%([-+# 0]*\d*(?:\.\d+)?)v")


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<nil>"
    return str(value)


def _sprint(args: tuple[Any, ...]) -> str:
    """Join operands, adding a space between two neighbours that are not strings."""
    parts: list[str] = []
    previous_is_str = True
    for index, arg in enumerate(args):
        is_str = isinstance(arg, str)
        if index and not is_str and not previous_is_str:
            parts.append(" ")
        parts.append(_text(arg))
        previous_is_str = is_str
    return "".join(parts)


def _sprintf(fmt: str, args: tuple[Any, ...]) -> str:
    """printf-style formatting where ``%v`` means the value's default text."""
    if not args:
        return fmt
    pattern = _VERB.sub(r"%\1s", fmt)
    converted = tuple(_text(a) if isinstance(a, bool) or a is None else a for a in args)
    return pattern % converted


class GrpcLogger:
    """Info goes to debug, warnings are raised to errors, fatal exits."""

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger
        self.fields = {f.key: f.value for f in (string_field(COMPONENT, COMPONENT_NAME),)}

    def _log(self, level: int, msg: str) -> None:
        self.logger.log(level, msg, extra={"fields": dict(self.fields)})

    def _fatal(self, msg: str) -> None:
        self._log(logging.CRITICAL, msg)
        raise SystemExit(1)

    def info(self, *args: Any) -> None:
        self._log(logging.DEBUG, _sprint(args))

    def infoln(self, *args: Any) -> None:
        self._log(logging.DEBUG, _sprint(args))

    def infof(self, fmt: str, *args: Any) -> None:
        self._log(logging.DEBUG, _sprintf(fmt, args))

    def warning(self, *args: Any) -> None:
        self._log(logging.ERROR, _sprint(args))

    def warningln(self, *args: Any) -> None:
        self._log(logging.ERROR, _sprint(args))

    def warningf(self, fmt: str, *args: Any) -> None:
        self._log(logging.ERROR, _sprintf(fmt, args))

    def error(self, *args: Any) -> None:
        self._log(logging.ERROR, _sprint(args))

    def errorln(self, *args: Any) -> None:
        self._log(logging.ERROR, _sprint(args))

    def errorf(self, fmt: str, *args: Any) -> None:
        self._log(logging.ERROR, _sprintf(fmt, args))

    def fatal(self, *args: Any) -> None:
        self._fatal(_sprint(args))

    def fatalln(self, *args: Any) -> None:
        self._fatal(_sprint(args))

    def fatalf(self, fmt: str, *args: Any) -> None:
        self._fatal(_sprintf(fmt, args))

    def v(self, level: int) -> bool:
        """Every verbosity level passes unless the underlying logger is disabled."""
        return not self.logger.disabled