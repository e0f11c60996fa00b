"""Shared pytest fixtures for structify tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from structify.core import ir
from structify.core.config import TransformConfig
from structify.core.parser import parse_declarations
from structify.core.pipeline import render_module, structify_all


def load_generated(source: str, **names: Any) -> SimpleNamespace:
    """Execute generated module source and return its globals as attributes.

    Extra keyword arguments are bound as module globals before execution.
    """
    namespace: dict[str, Any] = {"__name__": "structify_generated", **names}
    exec(compile(source, "<structify-generated>", "exec"), namespace)
    return SimpleNamespace(**namespace)


def generate(text: str, config: TransformConfig | None = None) -> str:
    """Parse declaration source and render the generated module."""
    declarations = parse_declarations(text, Path("test.rs"))
    return render_module(structify_all(declarations, config), source="test.rs")


@pytest.fixture
def render() -> Callable[..., str]:
    """Return the declaration-source-to-module-source helper."""
    return generate


@pytest.fixture
def load() -> Callable[..., SimpleNamespace]:
    """Return the generated-module loader."""
    return load_generated


@pytest.fixture
def build() -> Callable[..., SimpleNamespace]:
    """Return a helper that turns declaration source into a loaded module."""

    def _build(text: str, config: TransformConfig | None = None) -> SimpleNamespace:
        return load_generated(generate(text, config))

    return _build


@pytest.fixture
def color_declaration() -> ir.EnumDeclaration:
    """Return a public declaration with a repr hint and a few capabilities."""
    return ir.EnumDeclaration(
        name="Color",
        visibility="pub",
        attributes=[
            ir.Attribute(name="repr", args="u8"),
            ir.Attribute(name="derive", args="Debug, Default, Hash"),
        ],
        variants=[
            ir.Variant(name="Red"),
            ir.Variant(name="Green", discriminant="0x10"),
            ir.Variant(name="Blue"),
        ],
    )


@pytest.fixture
def declarations_file(tmp_path: Path) -> Path:
    """Write a small declaration file and return its path."""
    path = tmp_path / "colors.rs"
    path.write_text(
        """
// Palette used by the renderer
#[repr(u8)]
#[derive(Debug, Default, PartialEq, Eq)]
pub enum Color {
    Red,
    Green = 0x10,
    Blue,
}

#[derive(Debug)]
enum Shade {
    Light = -1,
    Dark,
}
"""
    )
    return path
