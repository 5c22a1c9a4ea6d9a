"""Tri-state value model for resource configuration trees.

Every node of a configuration tree is either null, unknown (not resolved yet
during planning) or a known scalar, object, list or set. Rules never see host
framework types, only these values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Tuple


class SchemaMismatchError(TypeError):
    """Raised when a known value does not have the shape a rule expects."""


class ConfigValue:
    """Base class of all configuration values."""

    __slots__ = ()

    @property
    def is_null(self) -> bool:
        return False

    @property
    def is_unknown(self) -> bool:
        return False

    @property
    def is_known(self) -> bool:
        return not (self.is_null or self.is_unknown)

    def get(self, name: str) -> "ConfigValue":
        raise SchemaMismatchError(f"Cannot read attribute '{name}' from {self!r}.")

    @property
    def elements(self) -> Tuple["ConfigValue", ...]:
        raise SchemaMismatchError(f"{self!r} is not a collection.")

    def scalar(self) -> Any:
        raise SchemaMismatchError(f"{self!r} is not a scalar.")

    def to_python(self) -> Any:
        raise NotImplementedError


class NullValue(ConfigValue):
    __slots__ = ()

    @property
    def is_null(self) -> bool:
        return True

    def get(self, name: str) -> ConfigValue:
        return NULL

    @property
    def elements(self) -> Tuple[ConfigValue, ...]:
        return ()

    def scalar(self) -> Any:
        return None

    def to_python(self) -> Any:
        return None

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "NULL"


class UnknownValue(ConfigValue):
    __slots__ = ()

    @property
    def is_unknown(self) -> bool:
        return True

    def get(self, name: str) -> ConfigValue:
        return UNKNOWN

    def to_python(self) -> Any:
        return UNKNOWN

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "UNKNOWN"


NULL = NullValue()
UNKNOWN = UnknownValue()


@dataclass(frozen=True)
class ScalarValue(ConfigValue):
    value: Any

    def scalar(self) -> Any:
        return self.value

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ObjectValue(ConfigValue):
    attributes: Mapping[str, ConfigValue] = field(default_factory=dict)

    def get(self, name: str) -> ConfigValue:
        """Return the attribute, treating attributes absent from the input as null."""

        return self.attributes.get(name, NULL)

    def __contains__(self, name: object) -> bool:
        return name in self.attributes

    def to_python(self) -> Any:
        return {key: value.to_python() for key, value in self.attributes.items()}


@dataclass(frozen=True)
class CollectionValue(ConfigValue):
    items: Tuple[ConfigValue, ...] = ()

    @property
    def elements(self) -> Tuple[ConfigValue, ...]:
        return self.items

    def __iter__(self) -> Iterator[ConfigValue]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_python(self) -> Any:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class ListValue(CollectionValue):
    """Ordered collection."""


@dataclass(frozen=True)
class SetValue(CollectionValue):
    """Unordered collection; element order carries no meaning."""


def from_python(value: Any, unknown: Any = None) -> ConfigValue:
    """Build a configuration tree from plain Python/JSON data.

    ``unknown`` mirrors the shape of ``value`` the way Terraform's
    ``after_unknown`` plan field does: ``True`` marks the node as unknown, nested
    dicts and lists descend into children. Existing :class:`ConfigValue`
    instances are returned untouched so tests can embed ``UNKNOWN`` directly.
    """

    if unknown is True:
        return UNKNOWN
    if isinstance(value, ConfigValue):
        return value
    if value is None:
        return NULL
    if isinstance(value, Mapping):
        unknown_map = unknown if isinstance(unknown, Mapping) else {}
        attributes = {
            str(key): from_python(item, unknown_map.get(key))
            for key, item in value.items()
        }
        # after_unknown may flag attributes that are absent from "after"
        for key, flag in unknown_map.items():
            if flag is True and key not in attributes:
                attributes[str(key)] = UNKNOWN
        return ObjectValue(attributes)
    if isinstance(value, (set, frozenset)):
        return SetValue(tuple(from_python(item) for item in value))
    if isinstance(value, (list, tuple)):
        unknown_seq = unknown if isinstance(unknown, (list, tuple)) else ()
        items = []
        for position, item in enumerate(value):
            flag = unknown_seq[position] if position < len(unknown_seq) else None
            items.append(from_python(item, flag))
        return ListValue(tuple(items))
    if isinstance(value, (str, bool, int, float)):
        return ScalarValue(value)
    raise SchemaMismatchError(f"Unsupported configuration value of type {type(value).__name__}.")

