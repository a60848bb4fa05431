"""
Modeler-specific exceptions.

Error codes:
- C0xx: Tool configuration (descriptor) errors
- I0xx: Input resolution errors
- G0xx: Geometry errors
- T0xx: Catalog errors

Only configuration and catalog errors reach callers.  Input and
geometry errors are raised inside a tool run, logged, and turned into
a boolean outcome or a skipped contribution.
"""

from typing import Any, Dict, Optional


class ModelerError(Exception):
    """Base exception for modeler errors."""

    code = "E000"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = dict(context or {})
        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return f"[{self.code}] {self.message}"
        details = ", ".join(f"{k}={v!r}" for k, v in sorted(self.context.items()))
        return f"[{self.code}] {self.message} ({details})"


class ConfigurationError(ModelerError):
    """Malformed port or parameter descriptor (C0xx)."""
    code = "C001"


class MissingInputError(ModelerError):
    """Required input unresolved or with the wrong cardinality (I0xx)."""
    code = "I001"


class DegenerateGeometryError(ModelerError):
    """Source geometry too degenerate to define a contribution (G0xx)."""
    code = "G001"


class UnknownToolError(ModelerError):
    """Catalog lookup by name failed (T0xx)."""
    code = "T001"


__all__ = [
    "ModelerError",
    "ConfigurationError",
    "MissingInputError",
    "DegenerateGeometryError",
    "UnknownToolError",
]
