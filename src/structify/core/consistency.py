"""
Consistency checks between declarations and generated code.

The synthesized shadow declaration lets static checkers notice a source
declaration drifting away from its generated wrapper. This module does the
same job explicitly: it reads generated Python source, collects the
metadata and constants defined for a wrapper, and compares them with a
fresh transformation of the declaration.
"""

from __future__ import annotations

import ast
import logging
from typing import TYPE_CHECKING

from . import ir

if TYPE_CHECKING:
    from .pipeline import Analysis

logger = logging.getLogger(__name__)


def _normalize(expr: str) -> str:
    try:
        return ast.unparse(ast.parse(expr.strip(), mode="eval"))
    except SyntaxError:
        return expr.strip()


def defined_classes(source: str) -> set[str]:
    """Return the names of module-level classes defined in generated source."""
    tree = ast.parse(source)
    return {node.name for node in tree.body if isinstance(node, ast.ClassDef)}


def defined_constants(source: str, wrapper: str) -> dict[str, str]:
    """
    Collect the named constants generated for a wrapper class.

    Looks for module-level statements of the form
    ``Wrapper.NAME = Wrapper(<expr>)``.

    Args:
        source: Generated Python module source
        wrapper: Wrapper class name

    Returns:
        Constant name -> normalized expression source, in source order
    """
    constants: dict[str, str] = {}
    tree = ast.parse(source)

    for node in tree.body:
        if not isinstance(node, ast.Assign) or len(node.targets) != 1:
            continue
        target = node.targets[0]
        value = node.value
        if not (
            isinstance(target, ast.Attribute)
            and isinstance(target.value, ast.Name)
            and target.value.id == wrapper
            and isinstance(value, ast.Call)
            and isinstance(value.func, ast.Name)
            and value.func.id == wrapper
            and len(value.args) == 1
        ):
            continue
        constants[target.attr] = ast.unparse(value.args[0])

    return constants


# Class attributes compared against a fresh analysis
METADATA_FIELDS = ("__backing__", "__repr_hints__", "__transparent__", "__capabilities__")


def defined_metadata(source: str, wrapper: str) -> dict[str, object]:
    """
    Collect the literal metadata attributes of a generated wrapper class.

    Only plain assignments of literal values in the class body are read;
    anything computed (such as ``__bits__`` for pointer-width types) is
    skipped.

    Args:
        source: Generated Python module source
        wrapper: Wrapper class name

    Returns:
        Attribute name -> value, for the fields named in METADATA_FIELDS
    """
    tree = ast.parse(source)
    metadata: dict[str, object] = {}

    for node in tree.body:
        if not isinstance(node, ast.ClassDef) or node.name != wrapper:
            continue
        for statement in node.body:
            if not isinstance(statement, ast.Assign) or len(statement.targets) != 1:
                continue
            target = statement.targets[0]
            if not isinstance(target, ast.Name) or target.id not in METADATA_FIELDS:
                continue
            try:
                metadata[target.id] = ast.literal_eval(statement.value)
            except ValueError:
                continue

    return metadata


def _expected_metadata(analysis: Analysis) -> dict[str, object]:
    representation = analysis.representation
    return {
        "__backing__": representation.backing.value,
        "__repr_hints__": tuple(representation.residual_hints),
        "__transparent__": representation.transparent,
        "__capabilities__": tuple(analysis.classified.capabilities.names()),
    }


def check_consistency(
    declaration: ir.EnumDeclaration, analysis: Analysis, source: str
) -> list[str]:
    """
    Compare generated source against a fresh analysis of a declaration.

    Args:
        declaration: The source declaration
        analysis: Classification, representation and discriminants freshly
            computed for the declaration
        source: Previously generated Python source

    Returns:
        Human-readable mismatches; empty when the source is in sync
    """
    name = declaration.name
    table = analysis.table
    problems: list[str] = []

    if name not in defined_classes(source):
        return [f"{name}: wrapper class is missing from the generated code"]

    metadata = defined_metadata(source, name)
    for field, expected in _expected_metadata(analysis).items():
        if field not in metadata:
            problems.append(f"{name}.{field}: attribute is missing from the generated code")
        elif metadata[field] != expected:
            problems.append(
                f"{name}.{field}: generated value {metadata[field]!r} "
                f"does not match declared value {expected!r}"
            )

    found = defined_constants(source, name)

    for variant, discriminant in table.entries.items():
        if variant not in found:
            problems.append(f"{name}.{variant}: constant is missing from the generated code")
        elif found[variant] != _normalize(discriminant.expr):
            problems.append(
                f"{name}.{variant}: generated value {found[variant]} "
                f"does not match declared value {discriminant.expr}"
            )

    for constant in found:
        if constant not in table:
            problems.append(f"{name}.{constant}: constant is not declared in {name}")

    if problems:
        logger.debug(f"{name} is out of sync: {len(problems)} problem(s)")
    return problems
