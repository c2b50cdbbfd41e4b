"""
Structured Value Model

The closed set of value kinds exchanged with the evaluator:
    - BoolValue
    - IntValue
    - StringValue
    - TupleValue (ordered sequence)
    - RecordValue (name -> value, field order irrelevant)

ARCHITECTURAL RULE:
    Values are immutable (frozen=True).
    Operators only read values and build new ones.
    A value tree is always finite and acyclic.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

# Integer range of the evaluator's machine integers.
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


class Value(ABC):
    """
    Base class for all structured values.

    Structure only. Evaluation belongs to the evaluator, printing
    belongs to `ppr`.
    """

    def __str__(self) -> str:
        return ppr(self)


@dataclass(frozen=True)
class BoolValue(Value):
    """A boolean: TRUE or FALSE."""

    val: bool


@dataclass(frozen=True)
class IntValue(Value):
    """
    An integer.

    Python integers are unbounded; range checks against INT_MIN/INT_MAX
    happen where text is parsed into integers (see `atoi`).
    """

    val: int


@dataclass(frozen=True)
class StringValue(Value):
    """A string."""

    val: str


@dataclass(frozen=True)
class TupleValue(Value):
    """
    An ordered sequence of values.

    Example:
        <<"echo", "hello">>

    Becomes:
        TupleValue((StringValue("echo"), StringValue("hello")))
    """

    elems: Tuple[Value, ...] = ()

    @classmethod
    def of(cls, *elems: Value) -> "TupleValue":
        return cls(tuple(elems))

    def __len__(self) -> int:
        return len(self.elems)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.elems)


@dataclass(frozen=True, eq=False)
class RecordValue(Value):
    """
    A mapping from field names to values.

    Example:
        [exitValue |-> 0, stdout |-> "hello\\n", stderr |-> ""]

    Properties:
        fields: (name, value) pairs, in construction order

    IMPORTANT:
        Construction order is kept (for printing and positional access)
        but equality and hashing ignore it.
        Field names are unique.
    """

    fields: Tuple[Tuple[str, Value], ...] = ()

    def __post_init__(self) -> None:
        seen = set()
        for name, _ in self.fields:
            if name in seen:
                raise ValueError(f"Duplicate record field: {name}")
            seen.add(name)

    @classmethod
    def of(cls, mapping: Mapping[str, Value]) -> "RecordValue":
        return cls(tuple(mapping.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordValue):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        return hash(frozenset(self.fields))

    def __len__(self) -> int:
        return len(self.fields)

    def as_dict(self) -> Dict[str, Value]:
        return dict(self.fields)

    def names(self) -> List[str]:
        return [name for name, _ in self.fields]

    def items(self) -> List[Tuple[str, Value]]:
        return list(self.fields)

    def get(self, name: str) -> Optional[Value]:
        """
        Retrieve a field by name.

        Args:
            name: Field name

        Returns:
            The field's value or None if the record has no such field
        """
        for field_name, value in self.fields:
            if field_name == name:
                return value
        return None


TRUE = BoolValue(True)
FALSE = BoolValue(False)


def _quote(s: str) -> str:
    s = s.replace("\\", "\\\\").replace('"', '\\"')
    s = s.replace("\n", "\\n").replace("\t", "\\t")
    return f'"{s}"'


def ppr(value: Value) -> str:
    """
    Printable form of a value, in the specification language's syntax.

    Used in error messages so users see the value as they wrote it.
    """
    if isinstance(value, BoolValue):
        return "TRUE" if value.val else "FALSE"
    if isinstance(value, IntValue):
        return str(value.val)
    if isinstance(value, StringValue):
        return _quote(value.val)
    if isinstance(value, TupleValue):
        return "<<" + ", ".join(ppr(e) for e in value.elems) + ">>"
    if isinstance(value, RecordValue):
        return "[" + ", ".join(f"{name} |-> {ppr(v)}" for name, v in value.fields) + "]"
    raise TypeError(f"Unsupported Value type: {type(value)}")
