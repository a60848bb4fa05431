"""Port and parameter descriptors published by every tool."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from dynmodeler.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Cardinality(Enum):
    """How many nodes a port may reference."""
    SINGLE = "single"
    MULTIPLE = "multiple"


class ParameterKind(Enum):
    """Value kind of a scalar parameter."""
    DOUBLE = "double"
    INT = "int"
    STRING = "string"
    ENUM = "enumerated-string"


@dataclass(frozen=True)
class PortDescriptor:
    """One input or output slot of a tool.

    ``role`` is the reference key resolved against the operation node.
    ``events`` lists the node events that should trigger a rerun; it is
    only meaningful on input ports.
    """

    name: str
    help: str
    node_types: Tuple[str, ...]
    role: str
    cardinality: Cardinality = Cardinality.SINGLE
    required: bool = False
    events: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "node_types", tuple(self.node_types))
        object.__setattr__(self, "events", tuple(self.events))
        if not self.name:
            raise ConfigurationError("port needs a display name", {"role": self.role})
        if not self.role:
            raise ConfigurationError("port needs a reference role", {"port": self.name})
        if not self.node_types:
            raise ConfigurationError("port accepts no node types", {"port": self.name})
        if not isinstance(self.cardinality, Cardinality):
            raise ConfigurationError(
                "bad cardinality", {"port": self.name, "cardinality": self.cardinality}
            )

    @property
    def multiple(self) -> bool:
        return self.cardinality is Cardinality.MULTIPLE

    def accepts(self, node: Any) -> bool:
        """Return ``True`` if ``node`` carries one of the accepted type tags."""

        return getattr(node, "type_tag", None) in self.node_types


@dataclass(frozen=True)
class ParameterDescriptor:
    """One scalar configuration value of a tool."""

    name: str
    help: str
    key: str
    kind: ParameterKind
    default: Any
    choices: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "choices", tuple(self.choices))
        ctx = {"parameter": self.key or self.name}
        if not self.name:
            raise ConfigurationError("parameter needs a display name", ctx)
        if not self.key:
            raise ConfigurationError("parameter needs a storage key", ctx)
        if not isinstance(self.kind, ParameterKind):
            raise ConfigurationError("bad parameter kind", dict(ctx, kind=self.kind))

        if self.kind is ParameterKind.ENUM:
            if not self.choices:
                raise ConfigurationError("enumerated parameter has no legal values", ctx)
            if len(set(self.choices)) != len(self.choices):
                raise ConfigurationError("enumerated parameter repeats a value", ctx)
            if self.default not in self.choices:
                raise ConfigurationError(
                    "default is not one of the legal values",
                    dict(ctx, default=self.default, choices=self.choices),
                )
        elif self.choices:
            raise ConfigurationError("only enumerated parameters take legal values", ctx)
        else:
            converted = _convert(self.kind, self.default)
            if converted is None:
                raise ConfigurationError(
                    "default does not match the parameter kind",
                    dict(ctx, default=self.default, kind=self.kind.value),
                )
            object.__setattr__(self, "default", converted)

    def coerce(self, value: Any) -> Any:
        """Convert a stored value to this parameter's kind.

        Missing or unconvertible values, and enumerated values outside
        the legal set, fall back to the default.
        """

        if value is None:
            return self.default
        if self.kind is ParameterKind.ENUM:
            text = str(value)
            if text in self.choices:
                return text
            logger.warning("parameter %s: %r is not a legal value, using %r",
                           self.key, value, self.default)
            return self.default
        converted = _convert(self.kind, value)
        if converted is None:
            logger.warning("parameter %s: cannot read %r as %s, using %r",
                           self.key, value, self.kind.value, self.default)
            return self.default
        return converted


def _convert(kind: ParameterKind, value: Any) -> Optional[Any]:
    if isinstance(value, bool):
        return None
    try:
        if kind is ParameterKind.DOUBLE:
            return float(value)
        if kind is ParameterKind.INT:
            if isinstance(value, float) and not value.is_integer():
                return None
            return int(value)
    except (TypeError, ValueError):
        return None
    if kind is ParameterKind.STRING:
        return str(value)
    return None


__all__ = [
    "Cardinality",
    "ParameterKind",
    "PortDescriptor",
    "ParameterDescriptor",
]
