"""
Tests for the built-in serializer backends (RAW, JSON, YAML).

Every backend must read back exactly what it wrote, with and without
compression where it supports it, and must reject mistyped options.
"""

import gzip

import pytest
from iobridge.backends.raw import RawSerializer
from iobridge.backends.json_backend import JsonSerializer
from iobridge.backends.yaml_backend import YamlSerializer
from iobridge.errors import ArgumentShapeError
from iobridge.values import BoolValue, IntValue, StringValue, TupleValue, RecordValue


def build_sample_value() -> TupleValue:
    return TupleValue.of(
        RecordValue.of({"exitValue": IntValue(0), "stdout": StringValue("ok\n"), "stderr": StringValue("")}),
        TupleValue.of(BoolValue(True), BoolValue(False)),
        IntValue(-7),
        StringValue("ünïcode"),
    )


def options(**kwargs) -> RecordValue:
    fields = {}
    for key, val in kwargs.items():
        fields[key] = BoolValue(val) if isinstance(val, bool) else IntValue(val)
    return RecordValue.of(fields)


class TestRawSerializer:
    """Native stream backend."""

    @pytest.mark.parametrize("compress", [False, True])
    def test_roundtrip(self, tmp_path, compress):
        backend = RawSerializer()
        path = str(tmp_path / "value.raw")
        value = build_sample_value()
        assert backend.serialize(value, path, options(compress=compress)) is True
        assert backend.deserialize(path, options(compress=compress)) == value

    def test_compress_option_required(self, tmp_path):
        with pytest.raises(ArgumentShapeError):
            RawSerializer().serialize(IntValue(1), str(tmp_path / "v"), RecordValue())

    def test_compress_option_must_be_boolean(self, tmp_path):
        opts = RecordValue.of({"compress": StringValue("yes")})
        with pytest.raises(ArgumentShapeError):
            RawSerializer().serialize(IntValue(1), str(tmp_path / "v"), opts)


class TestJsonSerializer:
    """JSON backend."""

    @pytest.mark.parametrize("compress", [False, True])
    def test_roundtrip(self, tmp_path, compress):
        backend = JsonSerializer()
        path = str(tmp_path / "value.json")
        value = build_sample_value()
        backend.serialize(value, path, options(compress=compress))
        assert backend.deserialize(path, options(compress=compress)) == value

    def test_compress_writes_gzip(self, tmp_path):
        path = tmp_path / "value.json.gz"
        JsonSerializer().serialize(IntValue(5), str(path), options(compress=True))
        with gzip.open(path, "rt", encoding="utf-8") as f:
            assert f.read() == "5"

    def test_indent(self, tmp_path):
        path = tmp_path / "value.json"
        value = RecordValue.of({"a": IntValue(1)})
        JsonSerializer().serialize(value, str(path), options(indent=2))
        assert path.read_text(encoding="utf-8") == '{\n  "a": 1\n}'

    def test_options_default_to_plain(self, tmp_path):
        path = tmp_path / "value.json"
        JsonSerializer().serialize(StringValue("x"), str(path), RecordValue())
        assert path.read_text(encoding="utf-8") == '"x"'


class TestYamlSerializer:
    """YAML backend."""

    def test_roundtrip(self, tmp_path):
        backend = YamlSerializer()
        path = str(tmp_path / "value.yaml")
        value = build_sample_value()
        backend.serialize(value, path, RecordValue())
        assert backend.deserialize(path, RecordValue()) == value

    def test_missing_file_propagates(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            YamlSerializer().deserialize(str(tmp_path / "absent.yaml"), RecordValue())
