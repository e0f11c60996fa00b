"""
Discriminant table types for structify IR.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Discriminant(BaseModel):
    """
    The value assigned to a variant.

    Attributes:
        expr: Python expression source producing the raw value
        value: Folded integer value, when the expression is a pure integer expression
    """

    expr: str
    value: int | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_folded(self) -> bool:
        return self.value is not None

    def __str__(self) -> str:
        return self.expr


class DiscriminantTable(BaseModel):
    """
    Insertion-ordered mapping from variant name to assigned discriminant.

    Attributes:
        entries: Variant name -> discriminant, in first-insertion order
        default_variant: The first variant processed, if any
    """

    entries: dict[str, Discriminant] = Field(default_factory=dict)
    default_variant: str | None = None

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __getitem__(self, name: str) -> Discriminant:
        return self.entries[name]

    def names(self) -> list[str]:
        return list(self.entries)

    def values(self) -> dict[str, int | None]:
        """Return the folded value of every entry (None where symbolic)."""
        return {name: d.value for name, d in self.entries.items()}

    def default_expr(self) -> str | None:
        """Expression for the default raw value, or None when empty."""
        if self.default_variant is None:
            return None
        return self.entries[self.default_variant].expr
