"""
AttributeResolver - produces the ordered attribute shape of a type.

The resolver asks its sources, in order, which one understands a type and
caches the resulting descriptors. Shapes are pure functions of the type, so
the cache is shared freely between calls and threads without locking.
"""

import logging
from typing import Iterable, Optional

from .base_source import AttributeDescriptor, AttributeSource
from .sources import DEFAULT_SOURCES

logger = logging.getLogger(__name__)


class AttributeResolver:
    """
    Resolves the instance attributes of configuration types.

    Example:
        resolver = AttributeResolver()
        for descriptor in resolver.resolve(KafkaSinkConfig):
            print(descriptor.name, descriptor.sensitive)

    A type that no source recognises, or whose shape cannot be enumerated,
    resolves to an empty tuple.
    """

    def __init__(self, sources: Optional[Iterable[AttributeSource]] = None):
        """
        Initialize the AttributeResolver.

        Args:
            sources: Attribute sources to consult, in priority order.
                     Defaults to dataclass, pydantic and annotated-class sources.
        """
        self._sources: list[AttributeSource] = list(
            DEFAULT_SOURCES if sources is None else sources
        )
        self._shapes: dict[type, tuple[AttributeDescriptor, ...]] = {}

    def add_source(self, source: AttributeSource) -> None:
        """
        Register an additional source with the highest priority.

        Cached shapes are dropped since the new source may claim types
        that were resolved before.
        """
        self._sources.insert(0, source)
        self._shapes.clear()
        logger.info(f"Registered attribute source: {source.name}")

    def list_sources(self) -> list[str]:
        """Return the names of the registered sources, in priority order."""
        return [source.name for source in self._sources]

    def source_for(self, cls: type) -> Optional[AttributeSource]:
        """Return the first source that applies to cls, if any."""
        for source in self._sources:
            if source.applies_to(cls):
                return source
        return None

    def is_config_type(self, cls: type) -> bool:
        """Return True if some source knows how to describe cls."""
        return cls in self._shapes or self.source_for(cls) is not None

    def resolve(self, cls: type) -> tuple[AttributeDescriptor, ...]:
        """
        Return the attribute descriptors of cls, inherited ones included.

        Args:
            cls: The configuration type to describe.

        Returns:
            Descriptors ordered base-first, unique by name. Empty when the
            type is unknown or its shape could not be enumerated.
        """
        shape = self._shapes.get(cls)
        if shape is not None:
            return shape

        source = self.source_for(cls)
        if source is None:
            return ()

        try:
            shape = tuple(source.describe(cls))
        except Exception as e:
            logger.warning(
                f"Could not resolve attributes of {cls.__qualname__} "
                f"with source '{source.name}' (treating as empty): {e}"
            )
            shape = ()

        self._shapes[cls] = shape
        return shape
