"""
Attribute classification for enumeration declarations.

Splits a declaration's attributes into representation hints and capability
requests, passes conditional markers through, and rejects everything else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from . import ir
from .errors import ErrorContext, UnsupportedAttribute, UnsupportedCapability

logger = logging.getLogger(__name__)

_OPENERS = {"(": ")", "[": "]", "{": "}"}


@dataclass
class ClassifiedAttributes:
    """Representation hints and capabilities collected from a declaration."""

    hints: list[str] = field(default_factory=list)
    capabilities: ir.CapabilitySet = field(default_factory=ir.CapabilitySet)


def split_args(args: str) -> list[str]:
    """
    Split attribute arguments on top-level commas.

    Nested brackets and quoted strings are kept intact, so
    "C, align(8)" gives ["C", "align(8)"]. Empty items are dropped.
    """
    items: list[str] = []
    depth: list[str] = []
    quote: str | None = None
    start = 0

    for i, ch in enumerate(args):
        if quote:
            if ch == quote and args[i - 1] != "\\":
                quote = None
        elif ch in ('"', "'"):
            quote = ch
        elif ch in _OPENERS:
            depth.append(_OPENERS[ch])
        elif depth and ch == depth[-1]:
            depth.pop()
        elif ch == "," and not depth:
            items.append(args[start:i])
            start = i + 1

    items.append(args[start:])
    return [item.strip() for item in items if item.strip()]


def classify_attributes(attributes: list[ir.Attribute]) -> ClassifiedAttributes:
    """
    Classify the attributes of a declaration.

    Args:
        attributes: Attributes in declaration order

    Returns:
        Accumulated representation hints and requested capabilities

    Raises:
        UnsupportedCapability: If a derive names something outside the vocabulary
        UnsupportedAttribute: If an attribute is not repr, derive, or cfg
    """
    result = ClassifiedAttributes()

    for attr in attributes:
        kind = attr.kind

        # Conditional markers are resolved before the transformer sees them
        if kind == ir.AttributeKind.CONDITIONAL:
            continue

        if kind == ir.AttributeKind.REPRESENTATION:
            result.hints.extend(split_args(attr.args))
            continue

        if kind == ir.AttributeKind.CAPABILITY:
            for name in split_args(attr.args):
                capability = ir.Capability.lookup(name)
                if capability is None:
                    raise UnsupportedCapability(name, ErrorContext.from_location(attr.location))
                result.capabilities = result.capabilities.with_capability(capability)
            continue

        raise UnsupportedAttribute(
            f"unsupported attribute: {attr}", ErrorContext.from_location(attr.location)
        )

    logger.debug(
        f"Classified {len(attributes)} attribute(s): hints={result.hints}, "
        f"capabilities={sorted(c.value for c in result.capabilities.derives)}"
    )
    return result


def check_variant_attributes(variant: ir.Variant) -> None:
    """
    Reject any attribute on a variant other than a conditional marker.

    Raises:
        UnsupportedAttribute: On the first non-conditional attribute
    """
    for attr in variant.attributes:
        if attr.is_conditional:
            continue
        raise UnsupportedAttribute(
            f"unsupported attribute on variant {variant.name}: {attr}",
            ErrorContext.from_location(attr.location or variant.location),
        )
