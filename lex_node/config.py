"""Configuration for the Lex conversation session.

Values are pulled from a :class:`ParameterReader`, which is satisfied by the
ROS parameter server (:class:`NodeParameterReader`) or by plain mappings in
tests and scripts (:class:`MappingParameterReader`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Tuple

from .errors import InvalidLexConfiguration

__all__ = [
    "AwsClientConfiguration",
    "DEFAULT_CONTENT_TYPE",
    "LexConfiguration",
    "MappingParameterReader",
    "NodeParameterReader",
    "ParameterReader",
    "build_client_configuration",
    "build_lex_configuration",
]

_LOGGER = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"
DEFAULT_TIMEOUT_MS = 9000
LEX_PREFIX = "lex_configuration"
CLIENT_PREFIX = "aws_client_configuration"
REQUIRED_FIELDS: Tuple[str, ...] = ("user_id", "bot_name", "bot_alias")
CONTENT_TYPE_FIELDS: Tuple[str, ...] = ("content_type", "accept_type")


class ParameterReader(Protocol):
    """Read-only view over a key/value parameter source.

    Both methods return ``None`` when the key is not present.
    """

    def read_str(self, name: str) -> Optional[str]:
        ...

    def read_int(self, name: str) -> Optional[int]:
        ...


class MappingParameterReader:
    """Parameter reader backed by in-memory dictionaries."""

    def __init__(
        self,
        strings: Optional[Mapping[str, str]] = None,
        ints: Optional[Mapping[str, int]] = None,
    ) -> None:
        self._strings = dict(strings or {})
        self._ints = dict(ints or {})

    def read_str(self, name: str) -> Optional[str]:
        value = self._strings.get(name)
        return None if value is None else str(value)

    def read_int(self, name: str) -> Optional[int]:
        value = self._ints.get(name)
        return None if value is None else int(value)


class NodeParameterReader:
    """Parameter reader over an rclpy node.

    Parameters are declared on first access with an empty default (``None``
    for integers), so an unset parameter reads back as not found rather than
    raising. An explicit ``0`` is returned as ``0``.
    """

    def __init__(self, node: Any) -> None:
        self._node = node

    def _value(self, name: str, default: Any) -> Any:
        if self._node.has_parameter(name):
            return self._node.get_parameter(name).value
        return self._node.declare_parameter(name, default).value

    def read_str(self, name: str) -> Optional[str]:
        value = self._value(name, "")
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def read_int(self, name: str) -> Optional[int]:
        value = self._value(name, None)
        if value is None:
            return None
        try:
            number = int(value)
        except (TypeError, ValueError):
            return None
        return number


def _key(prefix: str, separator: str, name: str) -> str:
    return f"{prefix}{separator}{name}" if prefix else name


@dataclass(frozen=True)
class LexConfiguration:
    """Identity of the Lex conversation plus default content types."""

    user_id: str = ""
    bot_name: str = ""
    bot_alias: str = ""
    content_type: str = DEFAULT_CONTENT_TYPE
    accept_type: str = DEFAULT_CONTENT_TYPE

    @staticmethod
    def key(name: str, *, prefix: str = LEX_PREFIX, separator: str = ".") -> str:
        """Return the parameter name holding ``name``.

        >>> LexConfiguration.key("bot_alias", separator="/")
        'lex_configuration/bot_alias'
        """

        return _key(prefix, separator, name)

    def missing_fields(self) -> Tuple[str, ...]:
        fields = REQUIRED_FIELDS + CONTENT_TYPE_FIELDS
        return tuple(name for name in fields if not str(getattr(self, name) or "").strip())

    def is_valid(self) -> bool:
        return not self.missing_fields()


@dataclass(frozen=True)
class AwsClientConfiguration:
    """Settings for the boto3 ``lex-runtime`` client."""

    region: Optional[str] = None
    connect_timeout_ms: int = DEFAULT_TIMEOUT_MS
    request_timeout_ms: int = DEFAULT_TIMEOUT_MS

    @property
    def connect_timeout(self) -> float:
        return self.connect_timeout_ms / 1000.0

    @property
    def request_timeout(self) -> float:
        return self.request_timeout_ms / 1000.0


def build_lex_configuration(
    reader: ParameterReader,
    *,
    prefix: str = LEX_PREFIX,
    separator: str = ".",
) -> LexConfiguration:
    """Read and validate the Lex configuration from ``reader``.

    Raises
    ------
    InvalidLexConfiguration
        For the first required value (user id, bot name, bot alias) that is
        missing or blank.
    """

    values = {}
    for name in REQUIRED_FIELDS:
        key = _key(prefix, separator, name)
        value = (reader.read_str(key) or "").strip()
        if not value:
            raise InvalidLexConfiguration(f"missing required parameter '{key}'")
        values[name] = value

    for name in CONTENT_TYPE_FIELDS:
        value = (reader.read_str(_key(prefix, separator, name)) or "").strip()
        values[name] = value or DEFAULT_CONTENT_TYPE

    configuration = LexConfiguration(**values)
    _LOGGER.debug(
        "Lex configuration loaded (bot=%s, alias=%s, user=%s)",
        configuration.bot_name,
        configuration.bot_alias,
        configuration.user_id,
    )
    return configuration


def build_client_configuration(
    reader: ParameterReader,
    *,
    prefix: str = CLIENT_PREFIX,
    separator: str = ".",
) -> AwsClientConfiguration:
    """Read the optional AWS client settings, falling back to defaults."""

    region = (reader.read_str(_key(prefix, separator, "region")) or "").strip() or None
    timeouts = {}
    for name in ("connect_timeout_ms", "request_timeout_ms"):
        key = _key(prefix, separator, name)
        value = reader.read_int(key)
        if value is None:
            value = DEFAULT_TIMEOUT_MS
        elif value <= 0:
            raise InvalidLexConfiguration(f"parameter '{key}' must be positive, got {value}")
        timeouts[name] = value
    return AwsClientConfiguration(region=region, **timeouts)
