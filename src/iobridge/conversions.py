"""
Validation and conversion helpers shared by the IO operators.

Every check raises ArgumentShapeError naming the operator that received
the value, so the user can tell which call went wrong.
"""

from typing import Dict, List, Optional

from iobridge.errors import ArgumentShapeError
from iobridge.values import (
    Value,
    BoolValue,
    IntValue,
    StringValue,
    TupleValue,
    RecordValue,
    ppr,
)

_REQUIRED = object()


def expect_tuple(value: Value, operator: str) -> TupleValue:
    if not isinstance(value, TupleValue):
        raise ArgumentShapeError(operator, "sequence", ppr(value))
    return value


def expect_record(value: Value, operator: str) -> RecordValue:
    if not isinstance(value, RecordValue):
        raise ArgumentShapeError(operator, "record", ppr(value))
    return value


def expect_string(value: Value, operator: str) -> str:
    if not isinstance(value, StringValue):
        raise ArgumentShapeError(operator, "string", ppr(value))
    return value.val


def expect_bool(value: Value, operator: str) -> bool:
    if not isinstance(value, BoolValue):
        raise ArgumentShapeError(operator, "boolean", ppr(value))
    return value.val


def to_strings(value: Value, operator: str) -> List[str]:
    """
    Convert a sequence of strings to a Python list.

    No escaping or quoting is done: each element is returned exactly as given.
    """
    tv = expect_tuple(value, operator)
    return [expect_string(elem, operator) for elem in tv.elems]


def to_environment(value: Value, operator: str) -> Dict[str, str]:
    """Convert a record of strings into environment-variable overrides."""
    rv = expect_record(value, operator)
    env: Dict[str, str] = {}
    for name, field_value in rv.fields:
        env[name] = expect_string(field_value, operator)
    return env


def bool_option(options: RecordValue, key: str, operator: str, default=_REQUIRED) -> bool:
    """
    Read a boolean setting from a backend options record.

    Args:
        options: Caller-supplied options record
        key: Field name, e.g. "compress"
        operator: Operator name used in error messages
        default: Value used when the field is absent; required if omitted

    Raises:
        ArgumentShapeError: If the field is missing (and required) or not a boolean
    """
    value = options.get(key)
    if value is None:
        if default is _REQUIRED:
            raise ArgumentShapeError(operator, f"record with a boolean field '{key}'", ppr(options))
        return default
    if not isinstance(value, BoolValue):
        raise ArgumentShapeError(operator, f"boolean for option '{key}'", ppr(value))
    return value.val


def int_option(options: RecordValue, key: str, operator: str, default: Optional[int] = None) -> Optional[int]:
    value = options.get(key)
    if value is None:
        return default
    if not isinstance(value, IntValue):
        raise ArgumentShapeError(operator, f"integer for option '{key}'", ppr(value))
    return value.val
