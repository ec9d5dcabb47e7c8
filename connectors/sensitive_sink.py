"""
SensitiveSink - a sink whose configuration carries a password.

The sink logs its loaded configuration on open(). The password is masked in
that log line by the configuration's MaskedReprMixin.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from masking import MaskedReprMixin, field_doc

from .io_config import SecretProvider, load_with_secrets

logger = logging.getLogger(__name__)


@dataclass(repr=False)
class SensitiveSinkConfig(MaskedReprMixin):
    """Configuration for the sensitive sink."""

    normal_field: str = field_doc(default="", help="A normal field that shouldn't be masked")
    sensitive_password: Optional[str] = field_doc(
        default=None, sensitive=True, help="A sensitive field that should be masked"
    )


@dataclass
class SinkContext:
    """Runtime context handed to a sink when it is opened."""
    sink_name: str
    secret_provider: SecretProvider = field(default_factory=SecretProvider)


@dataclass
class Record:
    """A single record delivered to a sink."""
    value: Any
    key: Optional[str] = None
    acked: bool = False

    def ack(self) -> None:
        self.acked = True


class SensitiveSink:
    """
    Sink that only logs and acknowledges records.

    Example:
        sink = SensitiveSink()
        sink.open({"normalField": "value"}, SinkContext("sensitive-data"))
        sink.write(Record("hello"))
        sink.close()
    """

    def __init__(self):
        self.config: Optional[SensitiveSinkConfig] = None
        self.records_written = 0

    def open(self, config_map: Mapping[str, Any], context: SinkContext) -> None:
        logger.info(f"Opening sensitive sink '{context.sink_name}' with config keys: {sorted(config_map)}")
        self.config = load_with_secrets(config_map, SensitiveSinkConfig, context.secret_provider)
        logger.info(f"Loaded sensitive sink config: {self.config}")

    def write(self, record: Record) -> None:
        if self.config is None:
            raise RuntimeError("Sink is not open")
        logger.info(f"Processing record: {record.value}")
        self.records_written += 1
        record.ack()

    def close(self) -> None:
        logger.info(f"Closing sensitive sink after {self.records_written} records")
        self.config = None
