"""
Sensitivity Classifier - decides whether an attribute must be masked.

The decision only looks at the metadata attached to the attribute's
declaration, never at its runtime value.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from .field_doc import FIELD_DOC_KEY, FieldDoc


def find_field_doc(metadata: Any) -> list[FieldDoc]:
    """
    Collect the FieldDoc markers found in an attribute's metadata.

    Args:
        metadata: Either a mapping (dataclass Field.metadata) or an iterable
                  of Annotated extras / pydantic FieldInfo.metadata entries.

    Returns:
        The markers, in declaration order. Empty if there are none.
    """
    if metadata is None:
        return []
    if isinstance(metadata, FieldDoc):
        return [metadata]
    if isinstance(metadata, Mapping):
        marker = metadata.get(FIELD_DOC_KEY)
        return [marker] if isinstance(marker, FieldDoc) else []
    if isinstance(metadata, Iterable) and not isinstance(metadata, (str, bytes)):
        return [item for item in metadata if isinstance(item, FieldDoc)]
    return []


def is_sensitive(*metadata: Any) -> bool:
    """
    Return True if any FieldDoc marker in the given metadata is sensitive.

    Several metadata sources can be passed at once, e.g. a dataclass field's
    metadata mapping and the Annotated extras of its type hint.
    """
    return any(
        marker.sensitive
        for source in metadata
        for marker in find_field_doc(source)
    )


def first_field_doc(*metadata: Any) -> Optional[FieldDoc]:
    """Return the first FieldDoc marker found in the given metadata, if any."""
    for source in metadata:
        markers = find_field_doc(source)
        if markers:
            return markers[0]
    return None
