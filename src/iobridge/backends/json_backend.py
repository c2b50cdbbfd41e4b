"""
JSON serializer.

Options:
    compress (optional boolean, default FALSE): gzip the file
    indent (optional integer): pretty-print with this indentation
"""

import gzip

from iobridge.backends.base import SerializerBackend
from iobridge.conversions import bool_option, int_option
from iobridge.serialization import value_to_json, value_from_json
from iobridge.values import Value, RecordValue


class JsonSerializer(SerializerBackend):
    type_name = "JSON"

    def serialize(self, value: Value, path: str, options: RecordValue) -> bool:
        compress = bool_option(options, "compress", "Serialize", default=False)
        indent = int_option(options, "indent", "Serialize")
        text = value_to_json(value, indent=indent)
        if compress:
            with gzip.open(path, "wt", encoding="utf-8") as f:
                f.write(text)
        else:
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        return True

    def deserialize(self, path: str, options: RecordValue) -> Value:
        compress = bool_option(options, "compress", "Deserialize", default=False)
        if compress:
            with gzip.open(path, "rt", encoding="utf-8") as f:
                return value_from_json(f.read())
        with open(path, "r", encoding="utf-8") as f:
            return value_from_json(f.read())
