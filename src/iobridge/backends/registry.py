"""
Serializer Registry: maps backend type names to backend instances.

Backends come from two places:
    - The "module:Class" list in IOSettings.serializers, imported once,
      lazily, on first lookup
    - Explicit `register(type_name, backend)` calls (tests inject fakes
      this way)

Lookup is linear in registration order and compares type names exactly.
When two backends share a type name the first one wins, unless the
settings ask for duplicates to be refused.
"""

import importlib
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from iobridge.backends.base import SerializerBackend
from iobridge.config import DUPLICATE_POLICIES
from iobridge.errors import RegistryError
from iobridge.values import Value, RecordValue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeserializeResult:
    """
    Outcome of a registry deserialize call.

    Properties:
        found: False when no backend has the requested type name
        value: The deserialized value (None when not found)
    """

    found: bool
    value: Optional[Value] = None


def load_backend(spec: str) -> SerializerBackend:
    """
    Import and instantiate a backend from a "module:Class" string.

    Raises:
        RegistryError: If the string is malformed, the import fails or
            the class is not a SerializerBackend
    """
    module_name, sep, class_name = spec.partition(":")
    if not sep or not module_name or not class_name:
        raise RegistryError(f"Backend spec must look like 'module:Class', got {spec!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise RegistryError(f"Cannot import serializer module {module_name!r}: {e}") from e
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, SerializerBackend):
        raise RegistryError(f"{spec!r} is not a SerializerBackend class")
    return cls()


class SerializerRegistry:
    """Central registry of serializer backends."""

    def __init__(self, backend_specs: Sequence[str] = (), duplicate_policy: str = "first"):
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise RegistryError(f"Unknown duplicate policy: {duplicate_policy!r}")
        self._backend_specs = list(backend_specs)
        self._duplicate_policy = duplicate_policy
        self._backends: List[Tuple[str, SerializerBackend]] = []
        self._backends_loaded = False

    def register(self, type_name: str, backend: SerializerBackend) -> None:
        """Register a backend under a type name (appended to lookup order)."""
        self._append(self._backends, type_name, backend)

    def _append(self, backends: List[Tuple[str, SerializerBackend]], type_name: str,
                backend: SerializerBackend) -> None:
        if any(name == type_name for name, _ in backends):
            if self._duplicate_policy == "error":
                raise RegistryError(f"Duplicate serializer type: {type_name}")
            logger.warning(
                "Serializer type %s already registered; %r will be shadowed", type_name, backend
            )
        backends.append((type_name, backend))
        logger.debug("Registered serializer %s -> %r", type_name, backend)

    def _ensure_loaded(self) -> None:
        """
        Ensure configured backends are registered (lazy loading).

        All or nothing: if any spec fails to load or register, no configured
        backend is added and the next lookup raises again.
        """
        if self._backends_loaded:
            return
        loaded = [load_backend(spec) for spec in self._backend_specs]
        backends = list(self._backends)
        for backend in loaded:
            self._append(backends, backend.type_name, backend)
        self._backends = backends
        self._backends_loaded = True

    def lookup(self, type_name: str) -> Optional[SerializerBackend]:
        """Return the first backend registered under `type_name`, or None."""
        self._ensure_loaded()
        for name, backend in self._backends:
            if name == type_name:
                return backend
        return None

    def types(self) -> List[str]:
        """List registered type names in lookup order (duplicates included)."""
        self._ensure_loaded()
        return [name for name, _ in self._backends]

    def serialize(self, value: Value, path: str, type_name: str, options: RecordValue) -> bool:
        """
        Serialize through the named backend.

        Returns:
            False if no backend has that type name (nothing is written),
            otherwise the backend's result
        """
        backend = self.lookup(type_name)
        if backend is None:
            logger.warning("No serializer registered for type %s", type_name)
            return False
        return backend.serialize(value, path, options)

    def deserialize(self, path: str, type_name: str, options: RecordValue) -> DeserializeResult:
        backend = self.lookup(type_name)
        if backend is None:
            logger.warning("No serializer registered for type %s", type_name)
            return DeserializeResult(found=False)
        return DeserializeResult(found=True, value=backend.deserialize(path, options))
