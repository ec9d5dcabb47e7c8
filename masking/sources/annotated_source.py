"""
Annotated Class Source - shapes of plain classes.

A plain (non-dataclass, non-pydantic) class is treated as a configuration
type when it opts in through the masking mixin, or when at least one of its
annotations carries a FieldDoc marker. Its shape is the set of annotated
names across its MRO, minus ClassVar declarations.
"""

import inspect
import operator
from ..base_source import (
    AttributeDescriptor,
    AttributeSource,
    declaring_types,
    is_class_var,
    type_hints,
)
from ..classifier import find_field_doc, first_field_doc, is_sensitive
from .dataclass_source import annotated_extras

# Built-in value types never describe a configuration shape
_VALUE_TYPES = (tuple, list, dict, set, frozenset, str, bytes, int, float)


class AnnotatedClassSource(AttributeSource):
    """Describes plain classes through their (inherited) annotations."""

    @property
    def name(self) -> str:
        return "annotated"

    def applies_to(self, cls: type) -> bool:
        if not isinstance(cls, type) or issubclass(cls, _VALUE_TYPES):
            return False
        if getattr(cls, "_masked_config", False):
            return True

        for klass in cls.__mro__:
            try:
                annotations = inspect.get_annotations(klass)
            except Exception:
                continue
            for hint in annotations.values():
                if isinstance(hint, str):
                    if "FieldDoc(" in hint:
                        return True
                elif find_field_doc(annotated_extras(hint)):
                    return True
        return False

    def describe(self, cls: type) -> list[AttributeDescriptor]:
        hints = type_hints(cls)
        owners = declaring_types(cls)

        descriptors = []
        for name, owner in owners.items():
            hint = hints.get(name)
            if is_class_var(hint):
                continue
            descriptors.append(
                AttributeDescriptor(
                    name=name,
                    declaring_type=owner,
                    sensitive=is_sensitive(annotated_extras(hint)),
                    accessor=operator.attrgetter(name),
                    doc=first_field_doc(annotated_extras(hint)),
                )
            )
        return descriptors
