"""
Configuration for structify transformations.

Settings are read from a structify.toml file (top-level keys) or from the
[tool.structify] table of a pyproject.toml:

    # structify.toml
    on_duplicate = "error"
    fold_constants = true
    emit_shadow = true
    indent = "    "
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .discriminants import DUPLICATE_POLICIES, DuplicatePolicy
from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformConfig:
    """Settings that shape a transformation."""

    on_duplicate: DuplicatePolicy = "overwrite"  # "overwrite" | "error"
    fold_constants: bool = True
    emit_shadow: bool = True
    indent: str = "    "

    def __post_init__(self) -> None:
        if self.on_duplicate not in DUPLICATE_POLICIES:
            raise ConfigError(
                f"on_duplicate must be one of {', '.join(DUPLICATE_POLICIES)}, "
                f"got {self.on_duplicate!r}"
            )
        if not self.indent or self.indent.strip():
            raise ConfigError(f"indent must be non-empty whitespace, got {self.indent!r}")


def config_from_dict(data: dict[str, Any], source: str = "<config>") -> TransformConfig:
    """
    Build a TransformConfig from parsed TOML data.

    Raises:
        ConfigError: On unknown keys or values of the wrong type
    """
    known = {f.name: f for f in fields(TransformConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"{source}: unknown configuration key(s): {', '.join(unknown)}")

    defaults = TransformConfig()
    for key, value in data.items():
        expected = type(getattr(defaults, key))
        if type(value) is not expected:
            raise ConfigError(
                f"{source}: '{key}' must be {expected.__name__}, got {type(value).__name__}"
            )

    return TransformConfig(**data)


def load_config(path: Path) -> TransformConfig:
    """
    Load configuration from a structify.toml or pyproject.toml file.

    A pyproject.toml without a [tool.structify] table yields the defaults.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: invalid TOML: {e}") from e

    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("structify", {})

    config = config_from_dict(data, source=str(path))
    logger.debug(f"Loaded configuration from {path}: {config}")
    return config


def find_config(start: Path) -> Path | None:
    """
    Find the nearest configuration file at or above a directory.

    structify.toml wins over pyproject.toml in the same directory; a
    pyproject.toml only counts when it has a [tool.structify] table.
    """
    directory = start if start.is_dir() else start.parent
    for candidate_dir in [directory, *directory.parents]:
        structify_toml = candidate_dir / "structify.toml"
        if structify_toml.is_file():
            return structify_toml

        pyproject = candidate_dir / "pyproject.toml"
        if pyproject.is_file() and "[tool.structify]" in pyproject.read_text(encoding="utf-8"):
            return pyproject

    return None
