"""YAML serializer. Takes no options."""

from iobridge.backends.base import SerializerBackend
from iobridge.serialization import value_to_yaml, value_from_yaml
from iobridge.values import Value, RecordValue


class YamlSerializer(SerializerBackend):
    type_name = "YAML"

    def serialize(self, value: Value, path: str, options: RecordValue) -> bool:
        with open(path, "w", encoding="utf-8") as f:
            f.write(value_to_yaml(value))
        return True

    def deserialize(self, path: str, options: RecordValue) -> Value:
        with open(path, "r", encoding="utf-8") as f:
            return value_from_yaml(f.read())
