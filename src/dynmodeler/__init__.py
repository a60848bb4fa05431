# -*- coding: utf-8 -*-
"""Reactive mesh and transform derivation tools for scene graphs."""

from importlib.metadata import PackageNotFoundError, version


try:
    __version__ = version("dynmodeler")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"
