"""
Kafka connector configurations.

Credentials (SASL JAAS config, truststore/keystore passwords) are declared
sensitive, so str()/repr() and MaskingJSONEncoder output never contain them.
"""

from dataclasses import dataclass
from typing import Any, Optional

from masking import MaskedReprMixin, field_doc


@dataclass(repr=False)
class KafkaClientConfig(MaskedReprMixin):
    """Settings shared by the Kafka sink and source."""

    bootstrap_servers: Optional[str] = field_doc(
        default=None, required=True, help="A comma-separated list of host and port pairs"
    )
    topic: Optional[str] = field_doc(
        default=None, required=True, help="The Kafka topic to read from or write to"
    )
    security_protocol: Optional[str] = field_doc(
        default=None, help="Protocol used to communicate with Kafka brokers"
    )
    sasl_mechanism: Optional[str] = field_doc(
        default=None, help="SASL mechanism used for client connections"
    )
    sasl_jaas_config: Optional[str] = field_doc(
        default=None, sensitive=True, help="JAAS login context parameters for SASL connections"
    )
    ssl_enabled_protocols: Optional[str] = field_doc(
        default=None, help="The list of protocols enabled for SSL connections"
    )
    ssl_endpoint_identification_algorithm: Optional[str] = field_doc(
        default=None, help="The endpoint identification algorithm to validate server hostname"
    )
    ssl_truststore_location: Optional[str] = field_doc(
        default=None, help="The location of the trust store file"
    )
    ssl_truststore_password: Optional[str] = field_doc(
        default=None, sensitive=True, help="The password for the trust store file"
    )
    ssl_keystore_location: Optional[str] = field_doc(
        default=None, help="The location of the key store file"
    )
    ssl_keystore_password: Optional[str] = field_doc(
        default=None, sensitive=True, help="The store password for the key store file"
    )


@dataclass(repr=False)
class KafkaSinkConfig(KafkaClientConfig):
    """Configuration of a sink writing records to Kafka."""

    acks: str = field_doc(default="1", help="The number of acknowledgments the producer requires")
    batch_size: int = field_doc(default=16384, help="The batch size in bytes for the producer")
    max_request_size: int = field_doc(default=1048576, help="The maximum size of a request in bytes")
    key_serializer_class: str = field_doc(
        default="org.apache.kafka.common.serialization.StringSerializer",
        help="The serializer class for Kafka producers to serialize keys",
    )
    value_serializer_class: str = field_doc(
        default="org.apache.kafka.common.serialization.ByteArraySerializer",
        help="The serializer class for Kafka producers to serialize values",
    )
    producer_config_properties: Optional[dict[str, Any]] = field_doc(
        default=None, help="Additional producer properties passed through to Kafka"
    )


@dataclass(repr=False)
class KafkaSourceConfig(KafkaClientConfig):
    """Configuration of a source consuming records from Kafka."""

    group_id: Optional[str] = field_doc(
        default=None, required=True, help="A unique string that identifies the consumer group"
    )
    fetch_min_bytes: int = field_doc(default=1, help="The minimum byte expected for each fetch response")
    auto_commit_enabled: bool = field_doc(default=True, help="Whether offsets are committed automatically")
    auto_commit_interval_ms: int = field_doc(default=5000, help="Auto-commit interval in milliseconds")
    session_timeout_ms: int = field_doc(default=30000, help="The timeout used to detect failures")
    heartbeat_interval_ms: int = field_doc(default=3000, help="The interval between heartbeats")
    consumer_config_properties: Optional[dict[str, Any]] = field_doc(
        default=None, help="Additional consumer properties passed through to Kafka"
    )
