"""
Native binary value stream.

Layout:
    MAGIC (4 bytes) | FORMAT_VERSION (1 byte) | one tagged value

Tagged values:
    FALSE / TRUE          tag only
    INT                   zig-zag varint (unbounded)
    STRING                varint byte length + UTF-8 bytes
    TUPLE                 varint count + elements
    RECORD                varint count + (name, value) pairs

Record field names are interned per stream. The first occurrence of a
name is written inline (NAME_NEW + string) and gets the next table index;
later occurrences write NAME_REF + index. On read, names are resolved
against a shared NamePool so equal names share one string object.

With compress=True the whole stream is wrapped in gzip.
"""

from __future__ import annotations

import gzip
import logging
from typing import BinaryIO, Dict, List, Optional

from iobridge.errors import ValueStreamError
from iobridge.values import (
    Value,
    BoolValue,
    IntValue,
    StringValue,
    TupleValue,
    RecordValue,
)

logger = logging.getLogger(__name__)

MAGIC = b"IOBV"
FORMAT_VERSION = 1

TAG_FALSE = 0x00
TAG_TRUE = 0x01
TAG_INT = 0x02
TAG_STRING = 0x03
TAG_TUPLE = 0x04
TAG_RECORD = 0x05

NAME_NEW = 0x00
NAME_REF = 0x01

_READ_CHUNK = 64 * 1024


class NamePool:
    """Process-wide table of interned record field names."""

    def __init__(self) -> None:
        self._names: Dict[str, str] = {}

    def intern(self, name: str) -> str:
        return self._names.setdefault(name, name)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)


SHARED_NAME_POOL = NamePool()


def _zigzag(n: int) -> int:
    return n << 1 if n >= 0 else ((-n) << 1) - 1


def _unzigzag(z: int) -> int:
    return z >> 1 if z & 1 == 0 else -((z + 1) >> 1)


class ValueWriter:
    """Writes tagged values to an open binary file."""

    def __init__(self, fh: BinaryIO):
        self._fh = fh
        self._names: Dict[str, int] = {}

    def write(self, value: Value) -> None:
        if isinstance(value, BoolValue):
            self._fh.write(bytes([TAG_TRUE if value.val else TAG_FALSE]))
        elif isinstance(value, IntValue):
            self._fh.write(bytes([TAG_INT]))
            self._write_varint(_zigzag(value.val))
        elif isinstance(value, StringValue):
            self._fh.write(bytes([TAG_STRING]))
            self._write_str(value.val)
        elif isinstance(value, TupleValue):
            self._fh.write(bytes([TAG_TUPLE]))
            self._write_varint(len(value.elems))
            for elem in value.elems:
                self.write(elem)
        elif isinstance(value, RecordValue):
            self._fh.write(bytes([TAG_RECORD]))
            self._write_varint(len(value.fields))
            for name, field_value in value.fields:
                self._write_name(name)
                self.write(field_value)
        else:
            raise TypeError(f"Unsupported Value type: {type(value)}")

    def _write_varint(self, n: int) -> None:
        out = bytearray()
        while True:
            byte = n & 0x7F
            n >>= 7
            if n:
                out.append(byte | 0x80)
            else:
                out.append(byte)
                break
        self._fh.write(bytes(out))

    def _write_str(self, s: str) -> None:
        data = s.encode("utf-8")
        self._write_varint(len(data))
        self._fh.write(data)

    def _write_name(self, name: str) -> None:
        index = self._names.get(name)
        if index is None:
            self._names[name] = len(self._names)
            self._fh.write(bytes([NAME_NEW]))
            self._write_str(name)
        else:
            self._fh.write(bytes([NAME_REF]))
            self._write_varint(index)


class ValueReader:
    """Reads tagged values from an open binary file."""

    def __init__(self, fh: BinaryIO, pool: NamePool):
        self._fh = fh
        self._pool = pool
        self._names: List[str] = []

    def read(self) -> Value:
        tag = self._read_exact(1)[0]
        if tag == TAG_FALSE:
            return BoolValue(False)
        if tag == TAG_TRUE:
            return BoolValue(True)
        if tag == TAG_INT:
            return IntValue(_unzigzag(self._read_varint()))
        if tag == TAG_STRING:
            return StringValue(self._read_str())
        if tag == TAG_TUPLE:
            count = self._read_varint()
            return TupleValue(tuple(self.read() for _ in range(count)))
        if tag == TAG_RECORD:
            count = self._read_varint()
            fields = []
            for _ in range(count):
                name = self._read_name()
                fields.append((name, self.read()))
            try:
                return RecordValue(tuple(fields))
            except ValueError as e:
                raise ValueStreamError(f"Malformed record in value stream: {e}") from e
        raise ValueStreamError(f"Unknown value tag: {tag:#04x}")

    def _read_exact(self, n: int) -> bytes:
        chunks = []
        remaining = n
        while remaining > 0:
            chunk = self._fh.read(min(remaining, _READ_CHUNK))
            if not chunk:
                raise ValueStreamError("Unexpected end of value stream")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def _read_varint(self) -> int:
        result = 0
        shift = 0
        while True:
            byte = self._read_exact(1)[0]
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7

    def _read_str(self) -> str:
        length = self._read_varint()
        try:
            return self._read_exact(length).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueStreamError(f"Invalid UTF-8 in value stream: {e}") from e

    def _read_name(self) -> str:
        kind = self._read_exact(1)[0]
        if kind == NAME_NEW:
            name = self._pool.intern(self._read_str())
            self._names.append(name)
            return name
        if kind == NAME_REF:
            index = self._read_varint()
            if index >= len(self._names):
                raise ValueStreamError(f"Undefined name reference: {index}")
            return self._names[index]
        raise ValueStreamError(f"Unknown name marker: {kind:#04x}")


def _open(path: str, mode: str, compress: bool) -> BinaryIO:
    if compress:
        return gzip.open(path, mode)
    return open(path, mode)


def write_value(value: Value, path: str, compress: bool = False) -> None:
    """
    Write a value to a file in the native stream format.

    Args:
        value: Value to write
        path: Destination file path (overwritten)
        compress: Wrap the stream in gzip
    """
    with _open(path, "wb", compress) as fh:
        fh.write(MAGIC + bytes([FORMAT_VERSION]))
        ValueWriter(fh).write(value)
    logger.debug("Wrote value stream to %s (compress=%s)", path, compress)


def read_value(path: str, compress: bool = False, pool: Optional[NamePool] = None) -> Value:
    """
    Read a value written by `write_value`.

    Args:
        path: Source file path
        compress: The stream is gzip-wrapped
        pool: Name pool for record field names (defaults to SHARED_NAME_POOL)

    Raises:
        ValueStreamError: If the file is not a well-formed value stream
    """
    with _open(path, "rb", compress) as fh:
        header = fh.read(len(MAGIC) + 1)
        if header[:len(MAGIC)] != MAGIC:
            raise ValueStreamError(f"Not a value stream: {path}")
        if header[len(MAGIC):] != bytes([FORMAT_VERSION]):
            raise ValueStreamError(f"Unsupported value stream version in {path}")
        reader = ValueReader(fh, pool if pool is not None else SHARED_NAME_POOL)
        value = reader.read()
        if fh.read(1):
            raise ValueStreamError(f"Trailing data after value in {path}")
    logger.debug("Read value stream from %s (compress=%s)", path, compress)
    return value
