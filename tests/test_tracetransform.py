import pytest

from telguard.attributes import (
    KeyValue,
    Value,
    bool_attr,
    bool_slice_attr,
    float_attr,
    float_slice_attr,
    int_attr,
    int_slice_attr,
    string_attr,
    string_slice_attr,
)
from telguard.tracetransform import (
    AnyValue,
    OtlpKeyValue,
    OtlpResource,
    OtlpScope,
    Resource,
    Scope,
    instrumentation_scope,
    key_value,
    key_values,
    resource_attributes,
    to_any_value,
    to_resource,
)


def test_empty_attributes():
    assert key_values(None) == []
    assert key_values([]) == []


def test_scalar_attributes():
    got = key_values(
        [
            int_attr("int to int", 123),
            int_attr("int64 to int64", 1234567),
            float_attr("float64 to double", 1.61),
            string_attr("string to string", "string"),
            bool_attr("bool to bool", True),
        ]
    )
    assert got[0] == OtlpKeyValue("int to int", AnyValue("int_value", 123))
    assert got[1] == OtlpKeyValue("int64 to int64", AnyValue("int_value", 1234567))
    assert got[2].key == "float64 to double"
    assert got[2].value.kind == "double_value"
    assert got[2].value.value == pytest.approx(1.61, abs=0.01)
    assert got[3] == OtlpKeyValue("string to string", AnyValue("string_value", "string"))
    assert got[4] == OtlpKeyValue("bool to bool", AnyValue("bool_value", True))


def test_invalid_attribute():
    got = key_values([KeyValue("invalid", Value())])
    assert got == [OtlpKeyValue("invalid", AnyValue("string_value", "INVALID"))]


def _array(kind, values):
    return AnyValue("array_value", tuple(AnyValue(kind, v) for v in values))


def test_array_attributes():
    got = key_values(
        [
            bool_slice_attr("bool slice to bool array", [True, False]),
            int_slice_attr("int slice to int64 array", [1, 2, 3]),
            int_slice_attr("int64 slice to int64 array", [1, 2, 3]),
            float_slice_attr("float64 slice to double array", [1.11, 2.22, 3.33]),
            string_slice_attr("string slice to string array", ["foo", "bar", "baz"]),
        ]
    )
    assert got[0] == OtlpKeyValue("bool slice to bool array", _array("bool_value", [True, False]))
    assert got[1] == OtlpKeyValue("int slice to int64 array", _array("int_value", [1, 2, 3]))
    assert got[2] == OtlpKeyValue("int64 slice to int64 array", _array("int_value", [1, 2, 3]))
    assert got[3].key == "float64 slice to double array"
    doubles = got[3].value.value
    assert [v.kind for v in doubles] == ["double_value"] * 3
    assert [v.value for v in doubles] == pytest.approx([1.11, 2.22, 3.33], abs=0.01)
    assert got[4] == OtlpKeyValue(
        "string slice to string array", _array("string_value", ["foo", "bar", "baz"])
    )


def test_key_value_single():
    assert key_value(string_attr("a", "b")) == OtlpKeyValue("a", AnyValue("string_value", "b"))
    assert to_any_value(Value()) == AnyValue("string_value", "INVALID")


def test_nil_resource():
    assert to_resource(None) is None


def test_empty_resource():
    result = to_resource(Resource())
    assert result == OtlpResource()
    assert not result.attributes


def test_resource_attributes():
    attrs = [int_attr("one", 1), int_attr("two", 2)]
    got = to_resource(Resource(*attrs)).attributes
    assert len(got) == 2
    assert sorted(got, key=lambda kv: kv.key) == sorted(key_values(attrs), key=lambda kv: kv.key)


def test_resource_later_key_wins_and_sorted():
    resource = Resource(int_attr("b", 1), int_attr("a", 2), int_attr("b", 3))
    assert resource.attributes() == [int_attr("a", 2), int_attr("b", 3)]
    assert resource_attributes(resource) == key_values([int_attr("a", 2), int_attr("b", 3)])


def test_instrumentation_scope():
    assert instrumentation_scope(Scope()) is None
    assert instrumentation_scope(Scope("lib", "1.0", "schema")) == OtlpScope("lib", "1.0")