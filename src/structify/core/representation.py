"""
Representation resolution.

Picks the wrapper's backing integer type from the accumulated repr hints
and keeps the remaining hints for re-emission.
"""

from __future__ import annotations

import logging

from . import ir
from .errors import ConflictingRepresentation, ErrorContext

logger = logging.getLogger(__name__)


def resolve_representation(
    hints: list[str], location: ir.SourceLocation | None = None
) -> ir.ResolvedRepresentation:
    """
    Resolve representation hints into a backing type and residual hints.

    A 'transparent' hint never selects a type. The first integer type hint
    is consumed, and becomes the backing type only when 'transparent' is
    absent. Every other hint is preserved verbatim.

    Args:
        hints: Representation hints in declaration order
        location: Declaration location, for diagnostics

    Returns:
        The resolved representation (default backing type i32)

    Raises:
        ConflictingRepresentation: On a second integer type hint, a repeated
            'transparent', or 'transparent' combined with a non-type hint
    """
    context = ErrorContext.from_location(location)
    transparent_count = hints.count(ir.TRANSPARENT_HINT)
    seen_type: ir.IntegerType | None = None
    backing: ir.IntegerType | None = None
    residual: list[str] = []

    for hint in hints:
        if hint == ir.TRANSPARENT_HINT:
            continue

        integer_type = ir.IntegerType.lookup(hint)
        if integer_type is None:
            residual.append(hint)
            continue

        if seen_type is not None:
            raise ConflictingRepresentation(
                f"conflicting representation hints: {seen_type} and {integer_type}", context
            )
        seen_type = integer_type
        if not transparent_count:
            backing = integer_type

    if transparent_count > 1:
        raise ConflictingRepresentation("conflicting representation hints: transparent", context)
    if transparent_count and residual:
        raise ConflictingRepresentation(
            f"transparent representation cannot be combined with {', '.join(residual)}",
            context,
        )

    resolved = ir.ResolvedRepresentation(
        backing=backing or ir.DEFAULT_BACKING_TYPE,
        residual_hints=tuple(residual),
        transparent=backing is not None,
    )
    logger.debug(f"Resolved representation: {resolved}")
    return resolved
