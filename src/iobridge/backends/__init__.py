"""Serializer backends (RAW, JSON, YAML) and the registry that dispatches to them."""

from .base import SerializerBackend
from .registry import DeserializeResult, SerializerRegistry, load_backend

__all__ = ["SerializerBackend", "SerializerRegistry", "DeserializeResult", "load_backend"]
