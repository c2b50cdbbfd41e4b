"""
Tests for the serializer registry.

These tests verify:
    - Lazy loading of configured backends
    - Explicit registration of fakes
    - First-match-wins and the "error" duplicate policy
    - Not-found handling for both directions
"""

import pytest
from iobridge.backends import DeserializeResult, SerializerBackend, SerializerRegistry, load_backend
from iobridge.backends.raw import RawSerializer
from iobridge.config import DEFAULT_SERIALIZERS
from iobridge.errors import RegistryError
from iobridge.values import IntValue, StringValue, RecordValue


class FakeBackend(SerializerBackend):
    """Records calls instead of touching the file system."""

    type_name = "FAKE"

    def __init__(self, tag="fake"):
        self.tag = tag
        self.written = []

    def serialize(self, value, path, options):
        self.written.append((value, path, options))
        return True

    def deserialize(self, path, options):
        return StringValue(self.tag)


class TestLoading:
    """Backends declared as 'module:Class' strings."""

    def test_default_backends(self):
        registry = SerializerRegistry(DEFAULT_SERIALIZERS)
        assert registry.types() == ["RAW", "JSON", "YAML"]
        assert isinstance(registry.lookup("RAW"), RawSerializer)

    def test_load_backend(self):
        backend = load_backend("iobridge.backends.raw:RawSerializer")
        assert backend.type_name == "RAW"

    def test_malformed_spec(self):
        with pytest.raises(RegistryError):
            load_backend("iobridge.backends.raw.RawSerializer")

    def test_missing_module(self):
        with pytest.raises(RegistryError):
            load_backend("iobridge.no_such_module:Thing")

    def test_not_a_backend_class(self):
        with pytest.raises(RegistryError):
            load_backend("iobridge.values:Value")

    def test_loading_is_lazy(self):
        """A bad spec only fails when the registry is first used."""
        registry = SerializerRegistry(["nowhere:Nothing"])
        with pytest.raises(RegistryError):
            registry.lookup("RAW")

    def test_failed_load_adds_nothing(self):
        """A bad spec leaves no earlier configured backend half-registered."""
        registry = SerializerRegistry(["iobridge.backends.raw:RawSerializer", "nowhere:Nothing"])
        for _ in range(2):
            with pytest.raises(RegistryError):
                registry.lookup("RAW")
        assert registry._backends == []


class TestDispatch:
    """Lookup by exact type name."""

    def test_register_and_serialize(self, tmp_path):
        registry = SerializerRegistry()
        fake = FakeBackend()
        registry.register("FAKE", fake)
        options = RecordValue()
        assert registry.serialize(IntValue(1), str(tmp_path / "x"), "FAKE", options) is True
        assert fake.written == [(IntValue(1), str(tmp_path / "x"), options)]

    def test_lookup_is_exact(self):
        registry = SerializerRegistry()
        registry.register("FAKE", FakeBackend())
        assert registry.lookup("fake") is None
        assert registry.lookup("FAKE ") is None

    def test_unknown_type_serialize_returns_false(self, tmp_path):
        """No backend: False and no file written."""
        registry = SerializerRegistry(DEFAULT_SERIALIZERS)
        path = tmp_path / "out.bin"
        assert registry.serialize(IntValue(1), str(path), "UNKNOWN_TYPE", RecordValue()) is False
        assert not path.exists()

    def test_unknown_type_deserialize_not_found(self, tmp_path):
        registry = SerializerRegistry(DEFAULT_SERIALIZERS)
        result = registry.deserialize(str(tmp_path / "x"), "UNKNOWN_TYPE", RecordValue())
        assert result == DeserializeResult(found=False)
        assert result.value is None

    def test_deserialize_found(self):
        registry = SerializerRegistry()
        registry.register("FAKE", FakeBackend("hello"))
        result = registry.deserialize("/unused", "FAKE", RecordValue())
        assert result.found
        assert result.value == StringValue("hello")


class TestDuplicates:
    """Two backends with the same type name."""

    def test_first_match_wins(self):
        registry = SerializerRegistry()
        first, second = FakeBackend("first"), FakeBackend("second")
        registry.register("FAKE", first)
        registry.register("FAKE", second)
        assert registry.lookup("FAKE") is first
        assert registry.types() == ["FAKE", "FAKE"]

    def test_injected_fake_shadows_configured_backend(self):
        """Fakes registered before first use come before configured backends."""
        registry = SerializerRegistry(DEFAULT_SERIALIZERS)
        fake = FakeBackend()
        registry.register("RAW", fake)
        assert registry.lookup("RAW") is fake

    def test_error_policy(self):
        registry = SerializerRegistry(duplicate_policy="error")
        registry.register("FAKE", FakeBackend())
        with pytest.raises(RegistryError):
            registry.register("FAKE", FakeBackend())

    def test_unknown_policy(self):
        with pytest.raises(RegistryError):
            SerializerRegistry(duplicate_policy="last")

    def test_error_policy_conflict_with_configured_backend(self):
        """A configured duplicate keeps failing instead of half-loading the rest."""
        registry = SerializerRegistry(DEFAULT_SERIALIZERS, duplicate_policy="error")
        fake = FakeBackend()
        registry.register("RAW", fake)
        for _ in range(2):
            with pytest.raises(RegistryError):
                registry.lookup("YAML")
        assert registry._backends == [("RAW", fake)]
