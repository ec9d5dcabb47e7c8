"""
Connectors - configuration types and plumbing built on the masking module.

Contents:
    - io_config: SecretProvider and load_with_secrets() for connector configs
    - kafka: KafkaSinkConfig / KafkaSourceConfig with masked credentials
    - sensitive_sink: SensitiveSink, which logs its config with the password masked
"""

from .io_config import SecretProvider, load_with_secrets
from .kafka import KafkaClientConfig, KafkaSinkConfig, KafkaSourceConfig
from .sensitive_sink import Record, SensitiveSink, SensitiveSinkConfig, SinkContext

__all__ = [
    "KafkaClientConfig",
    "KafkaSinkConfig",
    "KafkaSourceConfig",
    "Record",
    "SecretProvider",
    "SensitiveSink",
    "SensitiveSinkConfig",
    "SinkContext",
    "load_with_secrets",
]
