"""
Serialization helpers for structured values.

Provides lossless JSON/YAML round-trip via an intermediate plain-Python
representation:

    BoolValue   <-> bool
    IntValue    <-> int
    StringValue <-> str
    TupleValue  <-> list
    RecordValue <-> dict

This module intentionally keeps the mapping one-to-one so every plain
object produced here reads back to an equal value.
"""
from __future__ import annotations

import json
from typing import Any

import yaml

from iobridge.values import (
    Value,
    BoolValue,
    IntValue,
    StringValue,
    TupleValue,
    RecordValue,
)


def value_to_plain(value: Value) -> Any:
    if isinstance(value, BoolValue):
        return value.val
    if isinstance(value, IntValue):
        return value.val
    if isinstance(value, StringValue):
        return value.val
    if isinstance(value, TupleValue):
        return [value_to_plain(e) for e in value.elems]
    if isinstance(value, RecordValue):
        return {name: value_to_plain(v) for name, v in value.fields}
    raise TypeError(f"Unsupported Value type: {type(value)}")


def value_from_plain(obj: Any) -> Value:
    # bool first: bool is a subclass of int
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, int):
        return IntValue(obj)
    if isinstance(obj, str):
        return StringValue(obj)
    if isinstance(obj, (list, tuple)):
        return TupleValue(tuple(value_from_plain(e) for e in obj))
    if isinstance(obj, dict):
        return RecordValue(tuple((str(k), value_from_plain(v)) for k, v in obj.items()))
    raise TypeError(f"Unsupported plain type: {type(obj)}")


def value_to_json(value: Value, indent: int | None = None) -> str:
    return json.dumps(value_to_plain(value), indent=indent, ensure_ascii=False)


def value_from_json(s: str) -> Value:
    return value_from_plain(json.loads(s))


def value_to_yaml(value: Value) -> str:
    return yaml.safe_dump(value_to_plain(value), allow_unicode=True, sort_keys=False)


def value_from_yaml(s: str) -> Value:
    return value_from_plain(yaml.safe_load(s))
