"""Telemetry helpers: attributes and OTLP transforms, log encoding, samplers and cardinality guards."""

__version__ = "0.1.0"