"""
Enumeration declaration types for structify IR.

These models are the input of the transformation. They mirror the
declaration syntax read by the front end:

    #[repr(u8)]
    #[derive(Debug, Default)]
    pub enum Color {
        Red,
        Green = 0x10,
        Blue,
    }

Upstream producers other than the bundled parser can build them directly.
"""

from __future__ import annotations

import ast
import keyword
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .location import SourceLocation

# Attribute names with a fixed meaning to the classifier
REPR_ATTRIBUTE = "repr"
DERIVE_ATTRIBUTE = "derive"
CONDITIONAL_ATTRIBUTES = frozenset({"cfg", "cfg_attr"})


def _check_identifier(value: str) -> str:
    if not value.isidentifier() or keyword.iskeyword(value):
        raise ValueError(f"'{value}' is not a valid identifier")
    return value


class AttributeKind(StrEnum):
    """How the classifier treats an attribute."""

    REPRESENTATION = "representation"
    CAPABILITY = "capability"
    CONDITIONAL = "conditional"
    UNKNOWN = "unknown"


class Attribute(BaseModel):
    """
    An attribute attached to a declaration or a variant.

    Attributes:
        name: Attribute path (e.g. 'repr', 'derive', 'cfg')
        args: Raw text between the attribute's parentheses
        location: Where the attribute was written
    """

    name: str
    args: str = ""
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def kind(self) -> AttributeKind:
        if self.name == REPR_ATTRIBUTE:
            return AttributeKind.REPRESENTATION
        if self.name == DERIVE_ATTRIBUTE:
            return AttributeKind.CAPABILITY
        if self.name in CONDITIONAL_ATTRIBUTES:
            return AttributeKind.CONDITIONAL
        return AttributeKind.UNKNOWN

    @property
    def is_conditional(self) -> bool:
        return self.kind == AttributeKind.CONDITIONAL

    def __str__(self) -> str:
        if self.args:
            return f"#[{self.name}({self.args})]"
        return f"#[{self.name}]"


class VariantShape(StrEnum):
    """Payload shape of a variant. Only UNIT variants can be transformed."""

    UNIT = "unit"
    TUPLE = "tuple"
    STRUCT = "struct"


class Variant(BaseModel):
    """
    A single variant of an enumeration declaration.

    Attributes:
        name: Variant identifier
        discriminant: Optional explicit value, as Python expression source
        shape: Payload shape (unit for bare symbols)
        attributes: Attributes written on the variant
        location: Where the variant was declared
    """

    name: str
    discriminant: str | None = None
    shape: VariantShape = VariantShape.UNIT
    attributes: list[Attribute] = Field(default_factory=list)
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_identifier(v)

    @field_validator("discriminant")
    @classmethod
    def validate_discriminant(cls, v: str | None) -> str | None:
        """Ensure an explicit discriminant is a single expression."""
        if v is None:
            return v
        v = v.strip()
        try:
            ast.parse(v, mode="eval")
        except SyntaxError as e:
            raise ValueError(f"discriminant '{v}' is not a valid expression") from e
        return v


class EnumDeclaration(BaseModel):
    """
    A complete enumeration declaration.

    Attributes:
        name: Enumeration identifier, reused as the wrapper class name
        visibility: Visibility marker as written ('', 'pub', 'pub(crate)', ...)
        attributes: Ordered attributes on the declaration
        variants: Ordered variants
        location: Where the declaration starts
    """

    name: str
    visibility: str = ""
    attributes: list[Attribute] = Field(default_factory=list)
    variants: list[Variant] = Field(default_factory=list)
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_identifier(v)

    @property
    def is_public(self) -> bool:
        """Check if the declaration is visible outside its module."""
        return self.visibility.startswith("pub")

    def variant_names(self) -> list[str]:
        """Return variant names in declaration order."""
        return [v.name for v in self.variants]
