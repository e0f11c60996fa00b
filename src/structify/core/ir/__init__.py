"""
structify Intermediate Representation (IR) types.

Input declarations, the intermediate results of each pipeline stage, and
the synthesized output. All types are re-exported from this package.
"""

# Capabilities
from .capabilities import (
    CAPABILITY_ALIASES,
    WRAPPER_CAPABILITIES,
    Capability,
    CapabilitySet,
)

# Declarations
from .declaration import (
    CONDITIONAL_ATTRIBUTES,
    DERIVE_ATTRIBUTE,
    REPR_ATTRIBUTE,
    Attribute,
    AttributeKind,
    EnumDeclaration,
    Variant,
    VariantShape,
)

# Discriminants
from .discriminants import (
    Discriminant,
    DiscriminantTable,
)

# Synthesized output
from .fragment import (
    RESERVED_MEMBER_NAMES,
    Declaration,
    DeclarationKind,
    SynthesizedFragment,
    is_reserved_member,
)

# Source locations
from .location import (
    SourceLocation,
)

# Representation
from .representation import (
    DEFAULT_BACKING_TYPE,
    TRANSPARENT_HINT,
    IntegerType,
    ResolvedRepresentation,
)

__all__ = [
    # Capabilities
    "CAPABILITY_ALIASES",
    "WRAPPER_CAPABILITIES",
    "Capability",
    "CapabilitySet",
    # Declarations
    "CONDITIONAL_ATTRIBUTES",
    "DERIVE_ATTRIBUTE",
    "REPR_ATTRIBUTE",
    "Attribute",
    "AttributeKind",
    "EnumDeclaration",
    "Variant",
    "VariantShape",
    # Discriminants
    "Discriminant",
    "DiscriminantTable",
    # Synthesized output
    "RESERVED_MEMBER_NAMES",
    "Declaration",
    "DeclarationKind",
    "SynthesizedFragment",
    "is_reserved_member",
    # Source locations
    "SourceLocation",
    # Representation
    "DEFAULT_BACKING_TYPE",
    "TRANSPARENT_HINT",
    "IntegerType",
    "ResolvedRepresentation",
]
