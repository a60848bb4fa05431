"""
Base class for modeler tools.

A tool declares its input ports, output ports and parameters in its
constructor and never changes them afterwards.  ``run()`` is the only
entry point the host calls; it validates inputs, returns early when no
output is connected, and otherwise recomputes every connected output
from scratch through ``_run_internal()``.
"""

from __future__ import annotations

import abc
import logging
from typing import Any, Dict, List, Tuple

from dynmodeler.descriptors import Cardinality, ParameterDescriptor, ParameterKind, PortDescriptor
from dynmodeler.errors import ConfigurationError, MissingInputError, ModelerError
from dynmodeler.resolver import ReferenceResolver

logger = logging.getLogger(__name__)


class Tool(abc.ABC):
    """Base class for all modeler tools."""

    # Catalog name, unique across the catalog.
    name: str = "tool"

    def __init__(self):
        self.input_ports: List[PortDescriptor] = []
        self.output_ports: List[PortDescriptor] = []
        self.parameters: List[ParameterDescriptor] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    # --- descriptor registration -------------------------------------

    def add_input(self, name: str, help: str, node_types, role: str, *,
                  multiple: bool = False, required: bool = True, events=()) -> PortDescriptor:
        port = PortDescriptor(name, help, tuple(node_types), role,
                              Cardinality.MULTIPLE if multiple else Cardinality.SINGLE,
                              required, tuple(events))
        self._check_role(port)
        self.input_ports.append(port)
        return port

    def add_output(self, name: str, help: str, node_types, role: str) -> PortDescriptor:
        port = PortDescriptor(name, help, tuple(node_types), role)
        self._check_role(port)
        self.output_ports.append(port)
        return port

    def add_parameter(self, name: str, help: str, key: str, kind: ParameterKind,
                      default: Any, choices=()) -> ParameterDescriptor:
        param = ParameterDescriptor(name, help, key, kind, default, tuple(choices))
        if any(p.key == key for p in self.parameters):
            raise ConfigurationError("parameter key declared twice", {"tool": self.name, "key": key})
        self.parameters.append(param)
        return param

    def _check_role(self, port: PortDescriptor) -> None:
        for other in self.input_ports + self.output_ports:
            if other.role == port.role:
                raise ConfigurationError("reference role declared twice",
                                         {"tool": self.name, "role": port.role})

    # --- catalog ------------------------------------------------------

    def get_name(self) -> str:
        return self.name

    def create_instance(self) -> "Tool":
        """Fresh, independent instance of the same tool."""

        return type(self)()

    # --- inputs and outputs -------------------------------------------

    def check_required_inputs(self, context: ReferenceResolver) -> None:
        """Raise :class:`MissingInputError` on the first unsatisfied required port."""

        for port in self.input_ports:
            if not port.required:
                continue
            count = context.count(port.role)
            ctx = {"tool": self.name, "role": port.role, "count": count}
            if count == 0:
                raise MissingInputError(f"required input '{port.name}' is not set", ctx)
            if port.multiple:
                continue
            if count > 1:
                raise MissingInputError(f"input '{port.name}' takes a single node", ctx)
            node = context.resolve(port.role, 0)
            if node is None:
                raise MissingInputError(f"input '{port.name}' does not resolve", ctx)
            if not port.accepts(node):
                raise MissingInputError(
                    f"input '{port.name}' does not accept {getattr(node, 'type_tag', type(node).__name__)}",
                    ctx)

    def has_required_inputs(self, context: ReferenceResolver) -> bool:
        try:
            self.check_required_inputs(context)
        except MissingInputError as exc:
            logger.debug("%s", exc)
            return False
        return True

    def output_nodes(self, context: ReferenceResolver) -> Dict[str, Any]:
        """Connected output nodes by role; wrong node types count as unconnected."""

        nodes = {}
        for port in self.output_ports:
            node = context.resolve(port.role, 0)
            if node is not None and port.accepts(node):
                nodes[port.role] = node
        return nodes

    def input_events(self) -> List[Tuple[str, Tuple[str, ...]]]:
        """``(role, events)`` pairs the host should observe."""

        return [(port.role, port.events) for port in self.input_ports if port.events]

    def parameter_value(self, context: ReferenceResolver, index: int) -> Any:
        """Value of the ``index``-th declared parameter, coerced to its kind."""

        if index < 0 or index >= len(self.parameters):
            raise IndexError(f"{self.name} has no parameter #{index}")
        param = self.parameters[index]
        return param.coerce(context.parameter(param.key))

    # --- running ------------------------------------------------------

    def run(self, context: ReferenceResolver) -> bool:
        """Recompute all connected outputs.

        Returns ``False`` only when required inputs are missing or the
        computation fails; an unconnected output is a successful no-op.
        """

        try:
            self.check_required_inputs(context)
        except MissingInputError as exc:
            logger.error("%s", exc)
            return False

        outputs = self.output_nodes(context)
        if not outputs:
            logger.debug("%s: no output connected", self.name)
            return True

        try:
            return bool(self._run_internal(context, outputs))
        except (ModelerError, ValueError, ArithmeticError) as exc:
            logger.error("%s: run failed: %s", self.name, exc)
            return False

    @abc.abstractmethod
    def _run_internal(self, context: ReferenceResolver, outputs: Dict[str, Any]) -> bool:
        """Compute and write every node in ``outputs`` (keyed by role)."""


__all__ = ["Tool"]
