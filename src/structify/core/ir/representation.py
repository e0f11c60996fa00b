"""
Backing type definitions for structify IR.

The wrapper produced for a declaration stores a single raw integer of one
of twelve fixed-width (or pointer-width) integer types.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class IntegerType(StrEnum):
    """Supported backing integer types."""

    I8 = "i8"
    U8 = "u8"
    I16 = "i16"
    U16 = "u16"
    I32 = "i32"
    U32 = "u32"
    I64 = "i64"
    U64 = "u64"
    I128 = "i128"
    U128 = "u128"
    ISIZE = "isize"
    USIZE = "usize"

    @property
    def signed(self) -> bool:
        return self.value.startswith("i")

    @property
    def pointer_width(self) -> bool:
        return self.value.endswith("size")

    @property
    def bits(self) -> int | None:
        """Width in bits, or None for the pointer-width types."""
        if self.pointer_width:
            return None
        return int(self.value[1:])

    @property
    def value_range(self) -> range:
        """Values a discriminant may take. Pointer-width types assume 64 bits."""
        bits = self.bits or 64
        if self.signed:
            return range(-(1 << (bits - 1)), 1 << (bits - 1))
        return range(1 << bits)

    @classmethod
    def lookup(cls, token: str) -> IntegerType | None:
        """Return the type named by a representation hint, if any."""
        try:
            return cls(token)
        except ValueError:
            return None


DEFAULT_BACKING_TYPE = IntegerType.I32
TRANSPARENT_HINT = "transparent"


class ResolvedRepresentation(BaseModel):
    """
    Result of representation resolution.

    Attributes:
        backing: Backing integer type of the wrapper
        residual_hints: Hints re-emitted on the wrapper (e.g. 'C', 'align(8)')
        transparent: True when the backing type was selected by an explicit hint
    """

    backing: IntegerType = DEFAULT_BACKING_TYPE
    residual_hints: tuple[str, ...] = ()
    transparent: bool = False

    model_config = ConfigDict(frozen=True)
