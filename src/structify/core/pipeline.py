"""
The structify transformation pipeline.

Runs the four stages in order, each one either producing validated input
for the next or raising a terminal TransformError:

1. Attribute classification
2. Representation resolution
3. Discriminant assignment (with a range check against the backing type)
4. Code synthesis
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import ir
from .classifier import ClassifiedAttributes, classify_attributes
from .config import TransformConfig
from .discriminants import assign_discriminants, check_discriminant_range
from .representation import resolve_representation
from .synthesizer import CodeSynthesizer

logger = logging.getLogger(__name__)

HEADER_START = "# === AUTO-GENERATED BY STRUCTIFY ==========================================="
HEADER_END = "# ==========================================================================="


def assign_table(
    declaration: ir.EnumDeclaration, config: TransformConfig | None = None
) -> ir.DiscriminantTable:
    """Run discriminant assignment for a declaration with the configured policy."""
    config = config or TransformConfig()
    return assign_discriminants(
        declaration.variants,
        on_duplicate=config.on_duplicate,
        fold_constants=config.fold_constants,
    )


@dataclass(frozen=True)
class Analysis:
    """Results of the validating stages for one declaration."""

    classified: ClassifiedAttributes
    representation: ir.ResolvedRepresentation
    table: ir.DiscriminantTable


def analyze(declaration: ir.EnumDeclaration, config: TransformConfig | None = None) -> Analysis:
    """
    Run classification, representation resolution and discriminant assignment.

    Raises:
        TransformError: On the first validation failure
    """
    classified = classify_attributes(declaration.attributes)
    representation = resolve_representation(classified.hints, declaration.location)
    table = assign_table(declaration, config)
    check_discriminant_range(declaration.variants, table, representation.backing)
    return Analysis(classified, representation, table)


def structify(
    declaration: ir.EnumDeclaration, config: TransformConfig | None = None
) -> ir.SynthesizedFragment:
    """
    Transform one enumeration declaration into an open wrapper fragment.

    Args:
        declaration: The declaration to transform
        config: Transformation settings (defaults when omitted)

    Returns:
        The synthesized fragment

    Raises:
        TransformError: On the first validation failure; nothing is emitted
    """
    config = config or TransformConfig()
    logger.debug(f"Transforming {declaration.name}")

    analysis = analyze(declaration, config)

    synthesizer = CodeSynthesizer(indent=config.indent, emit_shadow=config.emit_shadow)
    return synthesizer.synthesize(
        declaration, analysis.representation, analysis.table, analysis.classified.capabilities
    )


def structify_all(
    declarations: list[ir.EnumDeclaration], config: TransformConfig | None = None
) -> list[ir.SynthesizedFragment]:
    """Transform several declarations; the first failure aborts all of them."""
    return [structify(declaration, config) for declaration in declarations]


def render_module(fragments: list[ir.SynthesizedFragment], source: str | None = None) -> str:
    """
    Render fragments as a complete Python module.

    Args:
        fragments: Fragments in output order
        source: Optional name of the file the declarations came from

    Returns:
        Module source: header, imports, __all__, then every fragment
    """
    lines = [HEADER_START]
    if source:
        lines.append(f"# Source: {source}")
    lines.append("# Do not edit by hand; regenerate with `structify generate`.")
    lines.append(HEADER_END)
    lines.append("")
    lines.append("from __future__ import annotations")
    lines.append("")

    imports = sorted({module for fragment in fragments for module in fragment.imports})
    lines.extend(f"import {module}" for module in imports)

    exports = [name for fragment in fragments for name in fragment.exports]
    if exports:
        lines.append("")
        lines.append("__all__ = [")
        lines.extend(f'    "{name}",' for name in exports)
        lines.append("]")

    header = "\n".join(lines) + "\n"
    body = "\n\n".join(fragment.render() for fragment in fragments)
    if not body:
        return header
    return header + "\n\n" + body
