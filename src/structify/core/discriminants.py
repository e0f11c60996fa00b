"""
Discriminant assignment.

Walks the variants once, in declaration order, and assigns each one a
value using C-style continuation: an explicit discriminant resets the
running value, and every other variant takes the successor of the
previous one.
"""

from __future__ import annotations

import logging
from typing import Literal

from . import ir
from .classifier import check_variant_attributes
from .errors import (
    DiscriminantOutOfRange,
    DuplicateVariant,
    ErrorContext,
    ReservedVariantName,
    UnsupportedVariantShape,
)
from .expressions import explicit, fold, literal, successor

logger = logging.getLogger(__name__)

DuplicatePolicy = Literal["overwrite", "error"]
DUPLICATE_POLICIES: tuple[str, ...] = ("overwrite", "error")


def assign_discriminants(
    variants: list[ir.Variant],
    *,
    on_duplicate: DuplicatePolicy = "overwrite",
    fold_constants: bool = True,
) -> ir.DiscriminantTable:
    """
    Assign a discriminant to every variant.

    Args:
        variants: Variants in declaration order
        on_duplicate: 'overwrite' keeps the last assignment for a repeated
            name; 'error' rejects the repeat
        fold_constants: Fold pure integer expressions to literals

    Returns:
        Table of assignments plus the default (first) variant

    Raises:
        UnsupportedVariantShape: If a variant carries data
        UnsupportedAttribute: If a variant has a non-conditional attribute
        ReservedVariantName: If a name would shadow a wrapper member
        DuplicateVariant: If a name repeats under the 'error' policy
    """
    entries: dict[str, ir.Discriminant] = {}
    running = literal(0, fold_constants=fold_constants)
    default_variant: str | None = None

    for variant in variants:
        if variant.shape != ir.VariantShape.UNIT:
            raise UnsupportedVariantShape(
                f"unsupported variant: {variant.name} has {variant.shape.value} fields",
                ErrorContext.from_location(variant.location),
            )

        if ir.is_reserved_member(variant.name):
            raise ReservedVariantName(variant.name, ErrorContext.from_location(variant.location))

        check_variant_attributes(variant)

        if variant.discriminant is not None:
            running = explicit(variant.discriminant, fold_constants=fold_constants)

        if variant.name in entries:
            if on_duplicate == "error":
                raise DuplicateVariant(variant.name, ErrorContext.from_location(variant.location))
            logger.debug(f"Variant {variant.name} declared again; keeping the later value")

        if default_variant is None:
            default_variant = variant.name

        entries[variant.name] = running
        running = successor(running, fold_constants=fold_constants)

    table = ir.DiscriminantTable(entries=entries, default_variant=default_variant)
    logger.debug(f"Assigned discriminants: {table.values()}")
    return table


def check_discriminant_range(
    variants: list[ir.Variant], table: ir.DiscriminantTable, backing: ir.IntegerType
) -> None:
    """
    Reject discriminants whose value is known and does not fit the backing type.

    Symbolic discriminants are only known when the generated module is
    imported, so they are not checked here.

    Raises:
        DiscriminantOutOfRange: On the first value outside the backing range
    """
    locations = {variant.name: variant.location for variant in variants}
    allowed = backing.value_range

    for name, discriminant in table.entries.items():
        value = discriminant.value if discriminant.is_folded else fold(discriminant.expr)
        if value is not None and value not in allowed:
            raise DiscriminantOutOfRange(
                name, value, backing.value, ErrorContext.from_location(locations.get(name))
            )
