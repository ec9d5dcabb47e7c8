"""
Connector configuration loading with secrets.

Connector configs arrive as plain mappings. Sensitive fields are usually
left out of those mappings and supplied through a SecretProvider instead
(environment, mounted secret files or a static map), so that the mapping
itself can be logged or stored safely.
"""

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from masking import AttributeResolver, get_default_engine

logger = logging.getLogger(__name__)


class SecretProvider:
    """
    Looks up secrets by field name.

    Priority: environment > secret files > static map. Environment variables
    are looked up as prefix + NAME_IN_UPPER_CASE; a .env file in the working
    directory is loaded into the environment when the provider is created.

    Example:
        provider = SecretProvider(prefix="KAFKA_")
        provider.get("ssl_truststore_password")  # reads KAFKA_SSL_TRUSTSTORE_PASSWORD
    """

    def __init__(
        self,
        prefix: str = "",
        files: Optional[Mapping[str, str]] = None,
        static: Optional[Mapping[str, str]] = None,
        use_dotenv: bool = True,
    ):
        """
        Initialize the SecretProvider.

        Args:
            prefix: Prefix prepended to environment variable names.
            files: Field name -> path of a file holding the secret.
            static: Field name -> secret value, consulted last.
            use_dotenv: If True, load a .env file into the environment.
        """
        if use_dotenv:
            load_dotenv()
        self.prefix = prefix
        self.files = dict(files or {})
        self.static = dict(static or {})

    def env_name(self, name: str) -> str:
        """Return the environment variable consulted for a field name."""
        return f"{self.prefix}{name}".upper()

    def get(self, name: str) -> Optional[str]:
        """Return the secret for a field name, or None if nobody provides it."""
        value = os.environ.get(self.env_name(name))
        if value:
            return value

        path = self.files.get(name)
        if path and os.path.exists(path):
            return Path(path).read_text().strip()

        return self.static.get(name)


def camel_case(name: str) -> str:
    """Convert snake_case to camelCase (ssl_truststore_password -> sslTruststorePassword)."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def load_with_secrets(
    config_map: Mapping[str, Any],
    config_cls: type,
    secret_provider: Optional[SecretProvider] = None,
    resolver: Optional[AttributeResolver] = None,
) -> Any:
    """
    Build a configuration object from a mapping, filling secrets in.

    Keys may be given as attribute names or in camelCase. A sensitive
    attribute missing from the mapping is read from the secret provider.
    Private (underscore) attributes are never populated.

    Args:
        config_map: The raw connector configuration.
        config_cls: The configuration type to instantiate.
        secret_provider: Where to look up missing sensitive values.
        resolver: Attribute resolver; defaults to the default engine's one.

    Returns:
        An instance of config_cls.

    Raises:
        ValueError: If config_cls is not a configuration type, or a field
                    marked required has no value.
    """
    resolver = resolver or get_default_engine().resolver
    if not resolver.is_config_type(config_cls):
        raise ValueError(f"{config_cls.__qualname__} is not a configuration type")

    provider = secret_provider or SecretProvider()
    values: dict[str, Any] = {}
    known: set[str] = set()

    for descriptor in resolver.resolve(config_cls):
        name = descriptor.name
        if name.startswith("_"):
            continue
        alias = camel_case(name)
        known.update((name, alias))

        value = config_map.get(name, config_map.get(alias))
        if value is None and descriptor.sensitive:
            value = provider.get(name)
            if value is not None:
                logger.info(f"Loaded secret for {config_cls.__qualname__}.{name}")

        if value is None and descriptor.doc is not None and descriptor.doc.required:
            raise ValueError(f"Required field '{name}' is missing for {config_cls.__qualname__}")

        if value is not None:
            values[name] = value

    for key in config_map:
        if key not in known:
            logger.warning(f"Ignoring unknown config key '{key}' for {config_cls.__qualname__}")

    return config_cls(**values)
