"""
Serializer backend contract.

A backend is a named, stateless codec that writes a value to a file and
reads it back. The registry never looks inside a backend's format; it
only matches `type_name` and delegates.
"""

from abc import ABC, abstractmethod

from iobridge.values import Value, RecordValue


class SerializerBackend(ABC):
    """
    Base class for serializer backends.

    Subclasses set `type_name` (e.g. "RAW") and implement both directions.
    Options are passed through untouched by the registry: each backend
    reads the keys it understands and fails if a required one is absent
    or mistyped. I/O failures propagate.
    """

    type_name: str = ""

    @abstractmethod
    def serialize(self, value: Value, path: str, options: RecordValue) -> bool:
        """Write `value` to `path`. Returns True on success."""

    @abstractmethod
    def deserialize(self, path: str, options: RecordValue) -> Value:
        """Read a value previously written to `path`."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type_name={self.type_name!r})"
