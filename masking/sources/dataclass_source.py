"""
Dataclass Source - shapes of @dataclass configuration types.

Sensitivity may be declared either through field metadata (field_doc())
or through a typing.Annotated FieldDoc extra on the field's type hint.
"""

import dataclasses
import operator
from typing import Annotated, Any, get_origin

from ..base_source import AttributeDescriptor, AttributeSource, declaring_types, type_hints
from ..classifier import first_field_doc, is_sensitive


def annotated_extras(hint: Any) -> tuple:
    """Return the Annotated extras of a type hint, or an empty tuple."""
    if get_origin(hint) is Annotated:
        return hint.__metadata__
    return ()


class DataclassSource(AttributeSource):
    """Describes dataclass types through dataclasses.fields()."""

    @property
    def name(self) -> str:
        return "dataclass"

    def applies_to(self, cls: type) -> bool:
        return dataclasses.is_dataclass(cls)

    def describe(self, cls: type) -> list[AttributeDescriptor]:
        hints = type_hints(cls)
        owners = declaring_types(cls)

        descriptors = []
        for f in dataclasses.fields(cls):
            extras = annotated_extras(hints.get(f.name))
            descriptors.append(
                AttributeDescriptor(
                    name=f.name,
                    declaring_type=owners.get(f.name, cls),
                    sensitive=is_sensitive(f.metadata, extras),
                    accessor=operator.attrgetter(f.name),
                    doc=first_field_doc(f.metadata, extras),
                )
            )
        return descriptors
