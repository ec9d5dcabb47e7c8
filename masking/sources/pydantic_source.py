"""
Pydantic Source - shapes of pydantic BaseModel configuration types.

Declared fields come from model_fields; FieldDoc markers given through
typing.Annotated end up in FieldInfo.metadata. Private attributes
(PrivateAttr / underscore names) are part of the shape as well, so that
access conventions cannot be used to bypass masking.
"""

import operator

from pydantic import BaseModel

from ..base_source import AttributeDescriptor, AttributeSource, declaring_types, own_hints
from ..classifier import first_field_doc, is_sensitive
from .dataclass_source import annotated_extras


class PydanticSource(AttributeSource):
    """Describes pydantic models through model_fields and private attributes."""

    @property
    def name(self) -> str:
        return "pydantic"

    def applies_to(self, cls: type) -> bool:
        return isinstance(cls, type) and issubclass(cls, BaseModel)

    def describe(self, cls: type) -> list[AttributeDescriptor]:
        owners = declaring_types(cls)
        descriptors = [
            AttributeDescriptor(
                name=name,
                declaring_type=owners.get(name, cls),
                sensitive=is_sensitive(info.metadata),
                accessor=operator.attrgetter(name),
                doc=first_field_doc(info.metadata),
            )
            for name, info in cls.model_fields.items()
        ]

        private = getattr(cls, "__private_attributes__", None) or {}
        for name in private:
            owner = owners.get(name, cls)
            # Evaluate the declaring class only
            hint = own_hints(owner).get(name)
            extras = annotated_extras(hint)
            descriptors.append(
                AttributeDescriptor(
                    name=name,
                    declaring_type=owner,
                    sensitive=is_sensitive(extras),
                    accessor=operator.attrgetter(name),
                    doc=first_field_doc(extras),
                )
            )

        return descriptors
