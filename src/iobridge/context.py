"""
IOContext: everything the IO operators share for the life of a process.

Created by one explicit initialization step and then only read:
    - settings (IOSettings)
    - environment snapshot (RecordValue)
    - serializer registry (SerializerRegistry)
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from iobridge.backends.registry import SerializerRegistry
from iobridge.config import IOSettings, configure_logging, load_settings
from iobridge.environment import capture_environment
from iobridge.values import RecordValue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IOContext:
    settings: IOSettings
    environment: RecordValue
    registry: SerializerRegistry

    @classmethod
    def create(
        cls,
        settings: Optional[IOSettings] = None,
        environ: Optional[Mapping[str, str]] = None,
        registry: Optional[SerializerRegistry] = None,
    ) -> "IOContext":
        """
        Initialize a context.

        Args:
            settings: Settings to use; loaded via `load_settings()` if None
            environ: Environment to snapshot; os.environ if None
            registry: Registry to use; built from settings if None
        """
        if settings is None:
            settings = load_settings()
        configure_logging(settings)
        if registry is None:
            registry = SerializerRegistry(settings.serializers, settings.duplicate_policy)
        environment = capture_environment(environ)
        logger.debug("IO context created with %d environment variables", len(environment))
        return cls(settings=settings, environment=environment, registry=registry)
