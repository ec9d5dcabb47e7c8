"""
FieldDoc - Declarative per-attribute metadata for configuration objects.

A FieldDoc marker documents a configuration attribute and flags whether its
value is sensitive. It can be attached three ways:

    - dataclass field metadata, usually through the field_doc() helper
    - typing.Annotated extras on a plain annotated class or dataclass
    - typing.Annotated extras on a pydantic model field

Example:
    from dataclasses import dataclass
    from typing import Annotated, Optional

    from masking import FieldDoc, field_doc

    @dataclass
    class JdbcSinkConfig:
        url: str = field_doc(default="", help="JDBC connection url")
        password: Optional[str] = field_doc(
            default=None, sensitive=True, help="Database password"
        )
        token: Annotated[Optional[str], FieldDoc(sensitive=True)] = None
"""

import dataclasses
from dataclasses import dataclass
from typing import Any

# Key under which the marker is stored in dataclasses.Field.metadata
FIELD_DOC_KEY = "field_doc"


@dataclass(frozen=True)
class FieldDoc:
    """Documentation and sensitivity marker for a single attribute."""
    help: str = ""
    default_value: Any = ""
    sensitive: bool = False
    required: bool = False


def field_doc(
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    help: str = "",
    sensitive: bool = False,
    required: bool = False,
    **field_kwargs: Any,
) -> Any:
    """
    Build a dataclass field carrying a FieldDoc marker.

    Args:
        default: Default value for the dataclass field.
        default_factory: Default factory for the dataclass field.
        help: Human-readable description of the attribute.
        sensitive: Whether the value must be masked in logs and output.
        required: Whether connector config loading must find a value.
        **field_kwargs: Passed through to dataclasses.field().

    Returns:
        A dataclasses.Field with the marker stored under FIELD_DOC_KEY.
    """
    marker = FieldDoc(
        help=help,
        default_value="" if default is dataclasses.MISSING else default,
        sensitive=sensitive,
        required=required,
    )
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[FIELD_DOC_KEY] = marker
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
        **field_kwargs,
    )
