"""
RAW serializer: the native binary value stream.

Options:
    compress (required, boolean): gzip the stream
"""

from iobridge.backends.base import SerializerBackend
from iobridge.conversions import bool_option
from iobridge.stream import read_value, write_value
from iobridge.values import Value, RecordValue


class RawSerializer(SerializerBackend):
    type_name = "RAW"

    def serialize(self, value: Value, path: str, options: RecordValue) -> bool:
        compress = bool_option(options, "compress", "Serialize")
        write_value(value, path, compress=compress)
        return True

    def deserialize(self, path: str, options: RecordValue) -> Value:
        compress = bool_option(options, "compress", "Deserialize")
        return read_value(path, compress=compress)
