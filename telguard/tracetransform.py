"""Conversion of attributes, resources and scopes into OTLP-shaped values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from telguard.attributes import KeyValue, Type, Value


@dataclass(frozen=True)
class AnyValue:
    """OTLP any-value: ``kind`` names the populated variant."""

    kind: str
    value: Any


@dataclass(frozen=True)
class OtlpKeyValue:
    key: str
    value: AnyValue


@dataclass
class OtlpResource:
    attributes: list[OtlpKeyValue] = field(default_factory=list)


@dataclass(frozen=True)
class Scope:
    """Instrumentation scope identity."""

    name: str = ""
    version: str = ""
    schema_url: str = ""


@dataclass(frozen=True)
class OtlpScope:
    name: str
    version: str


class Resource:
    """A set of attributes describing a telemetry source; later keys win."""

    def __init__(self, *attrs: KeyValue, schema_url: str = "") -> None:
        merged = {kv.key: kv for kv in attrs}
        self._attrs = tuple(sorted(merged.values(), key=lambda kv: kv.key))
        self.schema_url = schema_url

    def attributes(self) -> list[KeyValue]:
        """Attributes sorted by key."""
        return list(self._attrs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Resource):
            return NotImplemented
        return self._attrs == other._attrs and self.schema_url == other.schema_url

    def __repr__(self) -> str:
        return f"Resource({', '.join(map(repr, self._attrs))})"


def _array(kind: str, values) -> AnyValue:
    return AnyValue("array_value", tuple(AnyValue(kind, v) for v in values))


def to_any_value(value: Value) -> AnyValue:
    """Transform an attribute value into an OTLP any-value."""
    kind = value.type
    if kind is Type.BOOL:
        return AnyValue("bool_value", value.value)
    if kind is Type.BOOLSLICE:
        return _array("bool_value", value.value)
    if kind is Type.INT64:
        return AnyValue("int_value", value.value)
    if kind is Type.INT64SLICE:
        return _array("int_value", value.value)
    if kind is Type.FLOAT64:
        return AnyValue("double_value", value.value)
    if kind is Type.FLOAT64SLICE:
        return _array("double_value", value.value)
    if kind is Type.STRING:
        return AnyValue("string_value", value.value)
    if kind is Type.STRINGSLICE:
        return _array("string_value", value.value)
    return AnyValue("string_value", "INVALID")


def key_value(kv: KeyValue) -> OtlpKeyValue:
    return OtlpKeyValue(kv.key, to_any_value(kv.value))


def key_values(attrs) -> list[OtlpKeyValue]:
    return [key_value(kv) for kv in attrs or ()]


def resource_attributes(resource: Resource) -> list[OtlpKeyValue]:
    return key_values(resource.attributes())


def to_resource(resource: Resource | None) -> OtlpResource | None:
    if resource is None:
        return None
    return OtlpResource(resource_attributes(resource))


def instrumentation_scope(scope: Scope) -> OtlpScope | None:
    if scope == Scope():
        return None
    return OtlpScope(name=scope.name, version=scope.version)