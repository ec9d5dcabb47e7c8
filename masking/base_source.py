"""
Base Attribute Source - Abstract base class for shape resolution strategies.

Extend this class to teach the resolver about a new kind of configuration
type. Each source defines:
    - name: Unique identifier for the source
    - applies_to(): Whether the source understands a given type
    - describe(): The ordered attribute descriptors of that type

Built-in sources live in the sources/ package:
    - dataclass: @dataclass configuration types
    - pydantic: pydantic BaseModel configuration types
    - annotated: plain classes whose annotations carry FieldDoc markers
"""

import inspect
import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Optional, get_origin, get_type_hints

from .field_doc import FieldDoc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttributeDescriptor:
    """A single resolved attribute of a configuration type."""
    name: str  # attribute name as stored on the instance
    declaring_type: type  # class whose declaration wins for this name
    sensitive: bool  # static classification from FieldDoc metadata
    accessor: Callable[[Any], Any] = field(compare=False, repr=False)
    doc: Optional[FieldDoc] = field(default=None, compare=False, repr=False)

    def read(self, instance: Any) -> Any:
        """Read the current value of this attribute from an instance."""
        return self.accessor(instance)


def declaring_types(cls: type) -> dict[str, type]:
    """
    Map every annotated attribute name of cls to the class declaring it.

    Ancestors are walked base-first so that names keep the position of
    their first declaration, while a redeclaration in a subclass takes
    over as the declaring type.
    """
    owners: dict[str, type] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name in inspect.get_annotations(klass):
            owners[name] = klass
    return owners


def is_class_var(hint: Any) -> bool:
    """Return True for ClassVar annotations, which are not instance attributes."""
    if hint is ClassVar or get_origin(hint) is ClassVar:
        return True
    return isinstance(hint, str) and hint.startswith(("ClassVar", "typing.ClassVar"))


def own_hints(klass: type) -> dict[str, Any]:
    """
    Evaluate the annotations declared by klass itself, one at a time.

    An annotation that cannot be evaluated (e.g. a name only imported under
    TYPE_CHECKING) is kept as its raw string; the others are unaffected.
    """
    try:
        annotations = inspect.get_annotations(klass)
    except Exception as e:
        logger.warning(f"Could not read annotations of {klass.__qualname__}: {e}")
        return {}

    module = sys.modules.get(klass.__module__)
    globalns = vars(module) if module is not None else {}
    localns = dict(vars(klass))

    hints: dict[str, Any] = {}
    for name, hint in annotations.items():
        if isinstance(hint, str):
            try:
                hint = eval(hint, globalns, localns)
            except Exception as e:
                logger.warning(f"Could not evaluate annotation {klass.__qualname__}.{name}: {e}")
        hints[name] = hint
    return hints


def type_hints(cls: type) -> dict[str, Any]:
    """
    Return the type hints of cls and its ancestors, Annotated extras kept.

    Falls back to evaluating annotations one by one when typing cannot
    resolve all of them at once.
    """
    try:
        return get_type_hints(cls, include_extras=True)
    except Exception as e:
        logger.warning(
            f"Could not evaluate type hints of {cls.__qualname__}, "
            f"evaluating annotations one by one: {e}"
        )

    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if klass is not object:
            hints.update(own_hints(klass))
    return hints


class AttributeSource(ABC):
    """
    Abstract base class for attribute sources.

    Subclass this to add support for a new family of configuration types
    without modifying the core AttributeResolver.

    Example:
        class AttrsSource(AttributeSource):
            @property
            def name(self) -> str:
                return "attrs"

            def applies_to(self, cls: type) -> bool:
                return attrs.has(cls)

            def describe(self, cls: type) -> list[AttributeDescriptor]:
                return [
                    AttributeDescriptor(
                        name=a.name,
                        declaring_type=cls,
                        sensitive=is_sensitive(a.metadata),
                        accessor=operator.attrgetter(a.name),
                    )
                    for a in attrs.fields(cls)
                ]

    Note:
        describe() may raise when the type's shape cannot be enumerated;
        the resolver treats that as an empty shape.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this source (e.g., 'dataclass', 'pydantic')."""
        pass

    @abstractmethod
    def applies_to(self, cls: type) -> bool:
        """Return True if this source can describe the given type."""
        pass

    @abstractmethod
    def describe(self, cls: type) -> list[AttributeDescriptor]:
        """
        Return the attribute descriptors of cls, inherited ones included.

        Descriptors must be unique by name and ordered base-first.
        """
        pass

    def __repr__(self) -> str:
        return f"<AttributeSource: {self.name}>"
