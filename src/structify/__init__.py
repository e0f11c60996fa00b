"""
structify - turn closed enumeration declarations into open integer wrappers.

An enumeration such as

    #[derive(Debug)]
    enum Color { Red, Green = 0x10, Blue }

becomes a Python class holding one raw integer, with a named constant per
variant. Any raw value can be wrapped, not only the declared ones.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core import ir
from .core.errors import (
    ConfigError,
    ParseError,
    StructifyError,
    TransformError,
)
from .core.pipeline import render_module, structify, structify_all


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    # Fall back to installed metadata
    try:
        return _metadata_version("structify")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "StructifyError",
    "ParseError",
    "ConfigError",
    "TransformError",
    "structify",
    "structify_all",
    "render_module",
]
