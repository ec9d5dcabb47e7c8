"""
MaskingEngine - Core engine for redacting sensitive configuration attributes.

This engine orchestrates:
1. Attribute resolution of the object's type (inherited attributes included)
2. Sensitivity classification through FieldDoc metadata
3. Construction of a redacted projection, with cycle detection

The original object is never modified: the engine reads attributes and
builds a fresh dict. The visited set used for cycle detection lives only for
one top-level call, so concurrent calls never interfere.
"""

import logging
from typing import Any, Optional

from .resolver import AttributeResolver

logger = logging.getLogger(__name__)

MASK_VALUE = "********"


class MaskingError(Exception):
    """Raised when a projection cannot be built for a configuration object."""


class MaskingEngine:
    """
    Engine for masking sensitive attributes of configuration objects.

    Nested configuration objects, including those held in list, tuple,
    dict and set values, are masked recursively. A reference back to an
    object that is still being masked higher up the call stack is replaced
    by an empty projection (or an empty container) instead of recursing
    forever.

    Example:
        engine = MaskingEngine()

        engine.masked_projection(config)
        # {'normal_field': 'normalValue', 'sensitive_field': '********'}

        engine.to_masked_string(config)
        # '{normal_field=normalValue, sensitive_field=********}'
    """

    def __init__(self, resolver: Optional[AttributeResolver] = None):
        """
        Initialize the MaskingEngine.

        Args:
            resolver: The attribute resolver to use. A resolver with the
                      default sources is created when omitted.
        """
        self.resolver = resolver or AttributeResolver()

    def masked_projection(self, instance: Any) -> dict[str, Any]:
        """
        Build the redacted projection of a configuration object.

        Args:
            instance: The configuration object to mask. May be None.

        Returns:
            A new dict mapping every readable attribute name to its value,
            with present sensitive values replaced by MASK_VALUE.

        Raises:
            MaskingError: If the projection could not be built.
        """
        return self._project(instance, set())

    def to_masked_string(self, instance: Any) -> str:
        """
        Render the redacted projection as a flat key=value listing.

        Example:
            {bootstrap_servers=broker1:9092, ssl_truststore_password=********}
        """
        return format_projection(self.masked_projection(instance))

    def _project(self, instance: Any, visited: set[int]) -> dict[str, Any]:
        if instance is None:
            return {}

        key = id(instance)
        if key in visited:
            return {}

        visited.add(key)
        try:
            masked: dict[str, Any] = {}
            for descriptor in self.resolver.resolve(type(instance)):
                try:
                    value = descriptor.read(instance)
                except Exception as e:
                    logger.warning(f"Failed to get value for field {descriptor.name}: {e}")
                    continue

                if descriptor.sensitive and value is not None:
                    masked[descriptor.name] = MASK_VALUE
                else:
                    masked[descriptor.name] = self._mask_value(value, visited)
            return masked
        except MaskingError:
            raise
        except Exception as e:
            logger.error(f"Error creating masked config for {type(instance).__qualname__}: {e}")
            raise MaskingError(
                f"Could not mask {type(instance).__qualname__}: {e}"
            ) from e
        finally:
            visited.discard(key)

    def _mask_value(self, value: Any, visited: set[int]) -> Any:
        if value is None or isinstance(value, (str, bytes, int, float, bool)):
            return value
        if self.resolver.is_config_type(type(value)):
            return self._project(value, visited)
        if not isinstance(value, (list, tuple, dict, set, frozenset)):
            return value

        # Subclasses are rebuilt as their built-in base; sets become lists
        # since masked entries are unhashable
        if isinstance(value, dict):
            rebuild = dict
        elif isinstance(value, (set, frozenset)):
            rebuild = list
        else:
            rebuild = tuple if isinstance(value, tuple) else list

        key = id(value)
        if key in visited:
            return rebuild()

        visited.add(key)
        try:
            if rebuild is dict:
                return {k: self._mask_value(v, visited) for k, v in value.items()}
            return rebuild(self._mask_value(v, visited) for v in value)
        finally:
            visited.discard(key)


def format_projection(projection: Any) -> str:
    """Format a projection as {key=value, ...}, nested projections included."""
    if isinstance(projection, dict):
        items = ", ".join(f"{k}={format_projection(v)}" for k, v in projection.items())
        return f"{{{items}}}"
    if isinstance(projection, (list, tuple)):
        return "[" + ", ".join(format_projection(v) for v in projection) + "]"
    return str(projection)


# Singleton instance for convenience
_default_engine: Optional[MaskingEngine] = None


def get_default_engine() -> MaskingEngine:
    """
    Get the default MaskingEngine instance.

    This is a convenience function for simple use cases.
    For more control, instantiate MaskingEngine directly.
    """
    global _default_engine
    if _default_engine is None:
        _default_engine = MaskingEngine()
    return _default_engine


def get_masked_config(config: Any) -> dict[str, Any]:
    """Return the redacted projection of config using the default engine."""
    return get_default_engine().masked_projection(config)


def to_masked_string(config: Any) -> str:
    """Return the masked key=value rendering of config using the default engine."""
    return get_default_engine().to_masked_string(config)
