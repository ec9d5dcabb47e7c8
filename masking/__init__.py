"""
Masking Module - Sensitive field redaction for configuration objects

This module masks attributes declared sensitive (via FieldDoc metadata) before
configuration objects reach logs or serialized output, without modifying the
objects themselves.

Architecture:
    - FieldDoc / field_doc(): Declarative per-attribute metadata marker
    - AttributeResolver: Ordered attribute shape of a type, inherited ones included
    - is_sensitive(): Static classification from FieldDoc metadata
    - MaskingEngine: Builds the redacted projection, with cycle detection
    - adapters: JSON encoder, str()/repr() mixin and pydantic base model
    - sources/: Strategies for dataclasses, pydantic models and plain classes

Example:
    from masking import get_masked_config, to_masked_string

    get_masked_config(config)
    # {'normal_field': 'normalValue', 'sensitive_field': '********'}
    to_masked_string(config)
    # '{normal_field=normalValue, sensitive_field=********}'
"""

from .adapters import (
    MaskedModel,
    MaskedReprMixin,
    MaskingJSONEncoder,
    SerializationResult,
    SerializationStatus,
    dumps_masked,
)
from .base_source import AttributeDescriptor, AttributeSource
from .classifier import is_sensitive
from .engine import (
    MASK_VALUE,
    MaskingEngine,
    MaskingError,
    get_default_engine,
    get_masked_config,
    to_masked_string,
)
from .field_doc import FieldDoc, field_doc
from .resolver import AttributeResolver

__all__ = [
    "MASK_VALUE",
    "AttributeDescriptor",
    "AttributeResolver",
    "AttributeSource",
    "FieldDoc",
    "MaskedModel",
    "MaskedReprMixin",
    "MaskingEngine",
    "MaskingError",
    "MaskingJSONEncoder",
    "SerializationResult",
    "SerializationStatus",
    "dumps_masked",
    "field_doc",
    "get_default_engine",
    "get_masked_config",
    "is_sensitive",
    "to_masked_string",
]
