"""Trace and span identifier generation from a cryptographic source."""

from __future__ import annotations

import secrets

TRACE_ID_SIZE = 16
SPAN_ID_SIZE = 8


class CryptoIdGenerator:
    """Thread-safe generator drawing IDs from the OS random source."""

    def new_ids(self) -> tuple[bytes, bytes]:
        """A fresh trace ID and span ID."""
        return secrets.token_bytes(TRACE_ID_SIZE), secrets.token_bytes(SPAN_ID_SIZE)

    def new_span_id(self, trace_id: bytes) -> bytes:
        """A fresh span ID within the given trace."""
        return secrets.token_bytes(SPAN_ID_SIZE)