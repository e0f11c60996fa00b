"""
Synthesized output types for structify IR.

A SynthesizedFragment is the ordered list of declarations produced for one
enumeration. Declarations flagged as members belong inside the wrapper
class body; the rest are module-level statements.
"""

from __future__ import annotations

import textwrap
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class DeclarationKind(StrEnum):
    """Kinds of synthesized declarations."""

    ERROR_TYPE = "error_type"
    WRAPPER = "wrapper"
    INHERENT = "inherent"
    INT_CONVERSION = "int_conversion"
    STR_CONVERSION = "str_conversion"
    DEBUG = "debug"
    DEFAULT = "default"
    CONSTANTS = "constants"
    SHADOW = "shadow"


# Members the synthesizer may define on a wrapper class
RESERVED_MEMBER_NAMES = frozenset(
    {
        "_value",
        "new",
        "value",
        "from_value",
        "from_name",
        "to_name",
        "default",
        "clone",
    }
)


def is_reserved_member(name: str) -> bool:
    """Check whether a variant name would shadow a wrapper member.

    Double-underscore names are reserved too: dunders belong to the wrapper
    and other leading-dunder names are mangled inside the class body.
    """
    return name in RESERVED_MEMBER_NAMES or name.startswith("__")


class Declaration(BaseModel):
    """
    One synthesized declaration.

    Attributes:
        kind: What the declaration provides
        name: Primary name it defines
        source: Python source text, unindented
        member: True if the source belongs inside the wrapper class body
    """

    kind: DeclarationKind
    name: str
    source: str
    member: bool = False

    model_config = ConfigDict(frozen=True)


class SynthesizedFragment(BaseModel):
    """
    The complete output for one enumeration declaration.

    Attributes:
        name: Name of the wrapper class
        declarations: Declarations in emission order
        imports: Modules the rendered source needs imported
        exports: Public names (empty for a private declaration)
        indent: Indentation used for class members
    """

    name: str
    declarations: list[Declaration] = Field(default_factory=list)
    imports: tuple[str, ...] = ()
    exports: tuple[str, ...] = ()
    indent: str = "    "

    model_config = ConfigDict(frozen=True)

    def kinds(self) -> list[DeclarationKind]:
        return [d.kind for d in self.declarations]

    def get(self, kind: DeclarationKind) -> Declaration | None:
        """Return the first declaration of a kind, if present."""
        for declaration in self.declarations:
            if declaration.kind == kind:
                return declaration
        return None

    def render(self) -> str:
        """
        Render the fragment as splice-ready Python source.

        Member declarations are indented into the wrapper class, which is
        emitted where the WRAPPER declaration sits. Blocks are separated by
        blank lines.
        """
        blocks: list[str] = []
        members = [d.source for d in self.declarations if d.member]

        for declaration in self.declarations:
            if declaration.member:
                continue
            if declaration.kind == DeclarationKind.WRAPPER:
                body = "\n\n".join([declaration.source, *members])
                header = f"class {self.name}:"
                blocks.append(header + "\n" + textwrap.indent(body, self.indent))
            else:
                blocks.append(declaration.source)

        return "\n\n\n".join(blocks) + "\n"
