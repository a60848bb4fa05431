"""Runtime configuration and logging setup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_CONTINUOUS_UPDATE = False
DEFAULT_MERGE_TOLERANCE = 0.0

_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter(LOG_FORMAT))


def configure_logging(level: str | int = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Attach a stream handler to the package logger (once) and set its level."""

    logger = logging.getLogger("dynmodeler")
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"unknown log level: {level}")
        level = numeric
    logger.setLevel(level)
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    return logger


@dataclass
class ModelerConfig:
    """Settings shared by every operation a :class:`ModelerLogic` drives.

    ``presets`` maps a tool name to ``{parameter key: value}``; the
    values are written to operation nodes that have not set the key.
    ``merge_tolerance`` is the preset for the Append tool's
    ``MergeTolerance`` unless ``presets`` already names it.
    """

    continuous_update: bool = DEFAULT_CONTINUOUS_UPDATE
    merge_tolerance: float = DEFAULT_MERGE_TOLERANCE
    log_level: str = DEFAULT_LOG_LEVEL
    presets: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def presets_for(self, tool_name: str) -> Dict[str, Any]:
        values = dict(self.presets.get(tool_name, {}))
        if tool_name == "Append":
            values.setdefault("MergeTolerance", self.merge_tolerance)
        return values


def load_config(path: Path | str) -> ModelerConfig:
    """Load a YAML configuration file."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"modeler config not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"modeler config must be a mapping, got {type(data)!r}")

    known_keys = {"continuous_update", "merge_tolerance", "log_level", "presets"}
    unknown = sorted(k for k in data if k not in known_keys)
    if unknown:
        raise ValueError(f"modeler config has unknown keys: {', '.join(unknown)}")

    tolerance = float(data.get("merge_tolerance", DEFAULT_MERGE_TOLERANCE))
    if tolerance < 0.0:
        raise ValueError(f"merge_tolerance must be non-negative, got {tolerance}")

    presets_raw = data.get("presets", {}) or {}
    if not isinstance(presets_raw, dict):
        raise ValueError("presets must map tool names to parameter mappings")
    presets: Dict[str, Dict[str, Any]] = {}
    for tool_name, values in presets_raw.items():
        if not isinstance(values, dict):
            raise ValueError(f"presets for {tool_name!r} must be a mapping")
        presets[str(tool_name)] = {str(k): v for k, v in values.items()}

    continuous = data.get("continuous_update", DEFAULT_CONTINUOUS_UPDATE)
    if not isinstance(continuous, bool):
        raise ValueError("continuous_update must be true or false")

    return ModelerConfig(
        continuous_update=continuous,
        merge_tolerance=tolerance,
        log_level=str(data.get("log_level", DEFAULT_LOG_LEVEL)).upper(),
        presets=presets,
    )


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "DEFAULT_CONTINUOUS_UPDATE",
    "DEFAULT_MERGE_TOLERANCE",
    "ModelerConfig",
    "configure_logging",
    "load_config",
]
