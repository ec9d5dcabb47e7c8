"""
Serialization Adapters - plug the MaskingEngine into output formats.

Adapters:
    - dumps_masked(): JSON text with a tagged SerializationResult
    - MaskingJSONEncoder: json.JSONEncoder that masks configuration objects
      wherever they appear in the document
    - MaskedReprMixin: base marker type whose str()/repr() are masked
    - MaskedModel: pydantic BaseModel whose dumps and repr are masked

Failure policy:
    When the engine raises MaskingError the adapters log a warning and fall
    back to the default, UNMASKED serialization of the object. Output stays
    available at the cost of possibly leaking a secret; the warning makes
    the degradation visible and dumps_masked() reports it as
    SerializationStatus.FALLBACK_UNMASKED.
"""

import dataclasses
import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, SerializationInfo, SerializerFunctionWrapHandler, model_serializer

from .engine import MaskingEngine, MaskingError, format_projection, get_default_engine

logger = logging.getLogger(__name__)

# Serialization context flag that turns masking off for MaskedModel dumps
REVEAL_SENSITIVE = "reveal_sensitive"


class SerializationStatus(enum.Enum):
    """Which path a serialization call took."""
    MASKED = "masked"
    FALLBACK_UNMASKED = "fallback_unmasked"
    FAILED = "failed"


@dataclass
class SerializationResult:
    """Outcome of an adapter call."""
    status: SerializationStatus
    output: Optional[str]
    error: Optional[Exception] = None

    @property
    def masked(self) -> bool:
        return self.status is SerializationStatus.MASKED


def default_projection(obj: Any) -> Any:
    """
    Unmasked projection used when masking fails.

    Mirrors what the serialization format would do without the masking
    hook: dataclasses.asdict, model_dump, or the instance __dict__.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, BaseModel):
        return obj.model_dump(context={REVEAL_SENSITIVE: True})
    if hasattr(obj, "__dict__"):
        return dict(vars(obj))
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class MaskingJSONEncoder(json.JSONEncoder):
    """
    JSON encoder that routes configuration objects through the MaskingEngine.

    Any object the engine's resolver recognises is encoded as its redacted
    projection, so every subclass of a marker type such as MaskedReprMixin
    is covered without per-type registration. Plain json.dumps() without
    this encoder does not mask.

    Every MaskingError that made the encoder fall back to an unmasked
    projection is kept in fell_back, so callers can tell a fully masked
    document from a degraded one.

    Example:
        json.dumps({"sink": sink_config}, cls=MaskingJSONEncoder)
    """

    def __init__(self, *args, engine: Optional[MaskingEngine] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.engine = engine or get_default_engine()
        self.fell_back: list[MaskingError] = []

    def default(self, o: Any) -> Any:
        try:
            is_config = self.engine.resolver.is_config_type(type(o))
        except Exception as e:
            logger.warning(f"Could not inspect {type(o).__qualname__} for masking: {e}")
            raise TypeError(f"Object of type {type(o).__name__} cannot be inspected for masking") from e

        if is_config:
            try:
                return self.engine.masked_projection(o)
            except MaskingError as e:
                logger.warning(
                    f"Masking failed for {type(o).__qualname__}, "
                    f"falling back to unmasked serialization: {e}"
                )
                self.fell_back.append(e)
                return default_projection(o)
        if isinstance(o, (set, frozenset)):
            return list(o)
        return default_projection(o)


def dumps_masked(obj: Any, engine: Optional[MaskingEngine] = None, **json_kwargs) -> SerializationResult:
    """
    Serialize obj to JSON with sensitive attributes masked.

    Args:
        obj: A configuration object (or any JSON-compatible structure
             containing configuration objects).
        engine: The engine to use. Defaults to the shared default engine.
        **json_kwargs: Passed through to the encoder (indent, sort_keys...).

    Returns:
        A SerializationResult. Never raises: a masking failure anywhere in
        the document yields FALLBACK_UNMASKED; a value json cannot encode,
        or a failure of the fallback itself, yields FAILED.
    """
    engine = engine or get_default_engine()
    try:
        encoder = MaskingJSONEncoder(engine=engine, **json_kwargs)
        payload = engine.masked_projection(obj) if engine.resolver.is_config_type(type(obj)) else obj
        output = encoder.encode(payload)
    except MaskingError as e:
        logger.warning(
            f"Masking failed for {type(obj).__qualname__}, "
            f"falling back to unmasked serialization: {e}"
        )
        error: Exception = e
    except Exception as e:
        # Unencodable values never trigger the unmasked fallback
        logger.warning(f"Masked serialization of {type(obj).__qualname__} failed: {e}")
        return SerializationResult(SerializationStatus.FAILED, None, e)
    else:
        if encoder.fell_back:
            return SerializationResult(SerializationStatus.FALLBACK_UNMASKED, output, encoder.fell_back[0])
        return SerializationResult(SerializationStatus.MASKED, output)

    try:
        output = json.dumps(default_projection(obj), default=str, **json_kwargs)
        return SerializationResult(SerializationStatus.FALLBACK_UNMASKED, output, error)
    except Exception as e:
        logger.warning(f"Unmasked serialization of {type(obj).__qualname__} failed too: {e}")
        return SerializationResult(SerializationStatus.FAILED, None, e)


def _masked_listing(obj: Any) -> str:
    try:
        return format_projection(get_default_engine().masked_projection(obj))
    except MaskingError as e:
        logger.warning(
            f"Masking failed for {type(obj).__qualname__}, "
            f"falling back to unmasked string: {e}"
        )
    try:
        return format_projection(default_projection(obj))
    except Exception as e:
        logger.warning(f"Unmasked string of {type(obj).__qualname__} failed too: {e}")
        return "{}"


class MaskedReprMixin:
    """
    Base marker type for configuration classes whose text form is masked.

    str() and repr() render ClassName{name=value, ...} with sensitive values
    replaced. Dataclasses must be declared with repr=False, otherwise the
    generated __repr__ takes precedence over this one.

    Example:
        @dataclass(repr=False)
        class SinkConfig(MaskedReprMixin):
            password: Optional[str] = field_doc(default=None, sensitive=True)
    """

    _masked_config = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}{_masked_listing(self)}"

    def __str__(self) -> str:
        return self.__repr__()


class MaskedModel(BaseModel):
    """
    Pydantic base model whose serialized form is masked.

    model_dump() and model_dump_json() return the redacted projection unless
    the serialization context contains {"reveal_sensitive": True}. repr()
    and str() are masked as well.

    The masked dump leaves out the model's private attributes, like a plain
    dump, but it ignores include, exclude and by_alias; pass the reveal
    context to get pydantic's own handling of those options. repr() also
    lists private attributes, masked.

    Example:
        class SourceConfig(MaskedModel):
            topic: str
            token: Annotated[Optional[str], FieldDoc(sensitive=True)] = None

        SourceConfig(topic="t", token="x").model_dump_json()
        # '{"topic":"t","token":"********"}'
    """

    @model_serializer(mode="wrap")
    def serialize_masked(self, handler: SerializerFunctionWrapHandler, info: SerializationInfo):
        context = info.context or {}
        if context.get(REVEAL_SENSITIVE):
            return handler(self)
        try:
            projection = get_default_engine().masked_projection(self)
        except MaskingError as e:
            logger.warning(
                f"Masking failed for {type(self).__qualname__}, "
                f"falling back to unmasked serialization: {e}"
            )
            return handler(self)

        private = type(self).__private_attributes__
        return {name: value for name, value in projection.items() if name not in private}

    def __repr_args__(self):
        try:
            projection = get_default_engine().masked_projection(self)
        except MaskingError as e:
            logger.warning(
                f"Masking failed for {type(self).__qualname__}, "
                f"falling back to unmasked repr: {e}"
            )
            yield from super().__repr_args__()
            return
        yield from projection.items()
