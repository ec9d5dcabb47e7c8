"""
Attribute Sources Package

This package contains the strategies the AttributeResolver uses to
enumerate the attributes of a configuration type.

Available sources (tried in this order):
    - dataclass: @dataclass types, markers via field_doc() or Annotated
    - pydantic: BaseModel types, markers via Annotated field metadata
    - annotated: plain classes opting in with FieldDoc annotations or the
      masking mixin

To add a new source:
    1. Create a new file (e.g., attrs_source.py)
    2. Subclass AttributeSource
    3. Implement applies_to() and describe()
    4. Pass it to AttributeResolver(sources=[...]) or call resolver.add_source()
"""

from .annotated_source import AnnotatedClassSource
from .dataclass_source import DataclassSource
from .pydantic_source import PydanticSource

DEFAULT_SOURCES = (DataclassSource(), PydanticSource(), AnnotatedClassSource())

__all__ = ["AnnotatedClassSource", "DataclassSource", "PydanticSource", "DEFAULT_SOURCES"]
