"""
Tests for plain/JSON/YAML conversion of structured values.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `iobridge.serialization`.
"""

import pytest
from iobridge.values import BoolValue, IntValue, StringValue, TupleValue, RecordValue
from iobridge.serialization import (
    value_to_plain,
    value_from_plain,
    value_to_json,
    value_from_json,
    value_to_yaml,
    value_from_yaml,
)


def build_sample_value() -> RecordValue:
    return RecordValue.of({
        "flag": BoolValue(False),
        "n": IntValue(42),
        "s": StringValue("yes"),
        "digits": StringValue("123"),
        "seq": TupleValue.of(IntValue(1), TupleValue(), RecordValue()),
        "rec": RecordValue.of({"inner": StringValue("value")}),
    })


def test_plain_mapping():
    value = build_sample_value()
    plain = value_to_plain(value)
    assert plain == {
        "flag": False,
        "n": 42,
        "s": "yes",
        "digits": "123",
        "seq": [1, [], {}],
        "rec": {"inner": "value"},
    }
    assert value_from_plain(plain) == value


def test_bool_not_read_as_int():
    assert value_from_plain(True) == BoolValue(True)
    assert value_from_plain(1) == IntValue(1)


def test_unsupported_plain_type():
    with pytest.raises(TypeError):
        value_from_plain(1.5)


def test_json_roundtrip():
    value = build_sample_value()
    assert value_from_json(value_to_json(value)) == value


def test_yaml_roundtrip():
    """Strings that look like YAML booleans or numbers must stay strings."""
    value = build_sample_value()
    yaml_str = value_to_yaml(value)
    restored = value_from_yaml(yaml_str)
    assert restored == value
