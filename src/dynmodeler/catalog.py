"""Name-keyed registry of tool classes."""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence, Type

from dynmodeler.errors import ConfigurationError, UnknownToolError
from dynmodeler.tool import Tool

logger = logging.getLogger(__name__)


class ToolCatalog:
    """Tool classes by display name.

    A class is instantiated once on registration so that malformed
    descriptors are caught before any operation node can select it.
    """

    def __init__(self):
        self._tools: Dict[str, Type[Tool]] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def register(self, tool_cls: Type[Tool]) -> bool:
        """Register ``tool_cls``; return ``False`` if its descriptors are malformed.

        Raises :class:`ConfigurationError` when another tool already
        uses the same name.
        """

        if not (isinstance(tool_cls, type) and issubclass(tool_cls, Tool)):
            raise TypeError("tool_cls must inherit Tool")
        try:
            tool = tool_cls()
        except ConfigurationError as exc:
            logger.error("not registering %s: %s", tool_cls.__name__, exc)
            return False

        name = tool.get_name()
        existing = self._tools.get(name)
        if existing is not None and existing is not tool_cls:
            raise ConfigurationError("tool name already registered",
                                     {"name": name, "existing": existing.__name__})
        self._tools[name] = tool_cls
        logger.debug("registered tool %r", name)
        return True

    def tool_names(self) -> Sequence[str]:
        return tuple(sorted(self._tools))

    def create_instance(self, name: str) -> Tool:
        tool_cls = self._tools.get(name)
        if tool_cls is None:
            raise UnknownToolError("no tool with this name", {"name": name})
        return tool_cls()

    def describe(self, name: str) -> Dict[str, Any]:
        """Plain-data description of a tool's ports and parameters."""

        tool = self.create_instance(name)
        return {
            "name": tool.get_name(),
            "inputs": [_port_dict(p) for p in tool.input_ports],
            "outputs": [_port_dict(p) for p in tool.output_ports],
            "parameters": [
                {
                    "name": p.name,
                    "key": p.key,
                    "kind": p.kind.value,
                    "default": p.default,
                    "choices": list(p.choices),
                    "help": p.help,
                }
                for p in tool.parameters
            ],
        }


def _port_dict(port) -> Dict[str, Any]:
    return {
        "name": port.name,
        "role": port.role,
        "node_types": list(port.node_types),
        "cardinality": port.cardinality.value,
        "required": port.required,
        "events": list(port.events),
        "help": port.help,
    }


def default_catalog() -> ToolCatalog:
    """A catalog holding every built-in tool."""

    from dynmodeler.tools import BUILTIN_TOOLS

    catalog = ToolCatalog()
    for tool_cls in BUILTIN_TOOLS:
        catalog.register(tool_cls)
    return catalog


__all__ = ["ToolCatalog", "default_catalog"]
