"""
Code Synthesizer for structify.

Generates the Python source for an open enumeration wrapper from the
resolved representation, the discriminant table, and the requested
capabilities.

Generated pieces, in emission order:
1. Conversion error type (unrecognized value / unrecognized name)
2. Wrapper class: raw value slot, class metadata, equality and the
   requested comparison, hashing, copy and clone members
3. Inherent operations: new() and value()
4. Integer conversions
5. Name conversions
6. Debug formatting (optional)
7. Default value (optional)
8. Named constants
9. Shadow declaration for static checkers (optional)
"""

from __future__ import annotations

import logging

from . import ir

logger = logging.getLogger(__name__)

# Comparison dunders emitted for the ordering capability
ORDERING_METHODS: tuple[tuple[str, str], ...] = (
    ("__lt__", "<"),
    ("__le__", "<="),
    ("__gt__", ">"),
    ("__ge__", ">="),
)

POINTER_WIDTH_BITS = "ctypes.sizeof(ctypes.c_size_t) * 8"


class CodeSynthesizer:
    """
    Generate a SynthesizedFragment for one enumeration declaration.

    The fragment's member declarations are written unindented; the
    fragment indents them into the wrapper class when rendered.
    """

    def __init__(self, indent: str = "    ", emit_shadow: bool = True):
        self.indent = indent
        self.emit_shadow = emit_shadow

    def synthesize(
        self,
        declaration: ir.EnumDeclaration,
        representation: ir.ResolvedRepresentation,
        table: ir.DiscriminantTable,
        capabilities: ir.CapabilitySet,
    ) -> ir.SynthesizedFragment:
        """
        Generate every declaration for an enumeration.

        Args:
            declaration: The source declaration
            representation: Resolved backing type and residual hints
            table: Discriminant assignments and default variant
            capabilities: Requested capabilities

        Returns:
            The complete, ordered fragment
        """
        name = declaration.name
        kind = ir.DeclarationKind
        decls = [
            self._declaration(
                kind.ERROR_TYPE, f"{name}ConversionError", self._generate_error_type(name)
            ),
            self._declaration(
                kind.WRAPPER,
                name,
                self._generate_wrapper(name, representation, table, capabilities),
            ),
            self._member(kind.INHERENT, "new", self._generate_inherent(name, representation)),
            self._member(kind.INT_CONVERSION, "__int__", self._generate_int_conversion(name)),
            self._member(
                kind.STR_CONVERSION, "from_name", self._generate_str_conversion(name, table)
            ),
        ]

        if capabilities.debug:
            decls.append(self._member(kind.DEBUG, "__repr__", self._generate_debug(name, table)))

        if capabilities.default:
            decls.append(
                self._member(kind.DEFAULT, "default", self._generate_default(name, table))
            )

        if table.entries:
            decls.append(
                self._declaration(kind.CONSTANTS, name, self._generate_constants(name, table))
            )

        imports = ["typing"]
        if representation.backing.pointer_width:
            imports.append("ctypes")

        if self.emit_shadow:
            decls.append(
                self._declaration(kind.SHADOW, f"_{name}Shadow", self._generate_shadow(name, table))
            )
            imports.append("enum")

        exports: tuple[str, ...] = ()
        if declaration.is_public:
            exports = (
                name,
                f"{name}ConversionError",
                f"{name}UnrecognizedValue",
                f"{name}UnrecognizedName",
            )

        fragment = ir.SynthesizedFragment(
            name=name,
            declarations=decls,
            imports=tuple(sorted(imports)),
            exports=exports,
            indent=self.indent,
        )
        logger.debug(f"Synthesized {name}: {[k.value for k in fragment.kinds()]}")
        return fragment

    def _declaration(self, kind: ir.DeclarationKind, name: str, lines: list[str]) -> ir.Declaration:
        return ir.Declaration(kind=kind, name=name, source="\n".join(lines))

    def _member(self, kind: ir.DeclarationKind, name: str, lines: list[str]) -> ir.Declaration:
        """A declaration rendered inside the wrapper class body."""
        return ir.Declaration(kind=kind, name=name, source="\n".join(lines), member=True)

    def _i(self, depth: int) -> str:
        return self.indent * depth

    # === Error type ===

    def _generate_error_type(self, name: str) -> list[str]:
        i1, i2 = self._i(1), self._i(2)
        return [
            f"class {name}ConversionError(ValueError):",
            f'{i1}"""Raised when a {name} cannot be converted to or from its name."""',
            "",
            "",
            f"class {name}UnrecognizedValue({name}ConversionError):",
            f'{i1}"""No {name} constant has this raw value."""',
            "",
            f"{i1}def __init__(self, value: int) -> None:",
            f"{i2}self.value = value",
            f'{i2}super().__init__(f"unrecognized {name} value: {{value!r}}")',
            "",
            "",
            f"class {name}UnrecognizedName({name}ConversionError):",
            f'{i1}"""No {name} constant has this name."""',
            "",
            f"{i1}def __init__(self, name: str) -> None:",
            f"{i2}self.name = name",
            f'{i2}super().__init__(f"unrecognized {name} name: {{name!r}}")',
        ]

    # === Wrapper class ===

    def _generate_wrapper(
        self,
        name: str,
        representation: ir.ResolvedRepresentation,
        table: ir.DiscriminantTable,
        capabilities: ir.CapabilitySet,
    ) -> list[str]:
        i1, i2 = self._i(1), self._i(2)
        backing = representation.backing
        bits = str(backing.bits) if backing.bits is not None else POINTER_WIDTH_BITS

        lines = [
            f'"""Open enumeration over {backing.value} values."""',
            "",
            '__slots__ = ("_value",)',
            "",
            f'__backing__ = "{backing.value}"',
            f"__bits__ = {bits}",
            f"__signed__ = {backing.signed}",
            f"__repr_hints__ = {_tuple_literal(representation.residual_hints)}",
            f"__transparent__ = {representation.transparent}",
            f"__capabilities__ = {_tuple_literal(capabilities.names())}",
        ]

        if table.entries:
            lines.append("")
            lines.extend(f'{variant}: typing.ClassVar["{name}"]' for variant in table.entries)

        lines += [
            "",
            "def __init__(self, value: int) -> None:",
            f"{i1}raw = int(value) & ((1 << self.__bits__) - 1)",
            f"{i1}if self.__signed__ and raw >> (self.__bits__ - 1):",
            f"{i2}raw -= 1 << self.__bits__",
            f"{i1}self._value = raw",
            "",
            "def __eq__(self, other: object) -> bool:",
            f"{i1}if not isinstance(other, {name}):",
            f"{i2}return NotImplemented",
            f"{i1}return self._value == other._value",
        ]

        derives = capabilities.derives
        if ir.Capability.ORD in derives:
            for method, op in ORDERING_METHODS:
                lines += [
                    "",
                    f"def {method}(self, other: object) -> bool:",
                    f"{i1}if not isinstance(other, {name}):",
                    f"{i2}return NotImplemented",
                    f"{i1}return self._value {op} other._value",
                ]

        if ir.Capability.HASH in derives:
            lines += [
                "",
                "def __hash__(self) -> int:",
                f"{i1}return hash(self._value)",
            ]

        if ir.Capability.COPY in derives:
            lines += [
                "",
                f'def __copy__(self) -> "{name}":',
                f"{i1}return self",
                "",
                f'def __deepcopy__(self, memo: dict[int, object]) -> "{name}":',
                f"{i1}return self",
            ]

        if ir.Capability.CLONE in derives:
            lines += [
                "",
                f'def clone(self) -> "{name}":',
                f"{i1}return {name}(self._value)",
            ]

        return lines

    # === Inherent operations ===

    def _generate_inherent(self, name: str, representation: ir.ResolvedRepresentation) -> list[str]:
        i1 = self._i(1)
        backing = representation.backing.value
        return [
            "@classmethod",
            f'def new(cls, value: int) -> "{name}":',
            f'{i1}"""Wrap a raw {backing} value. Out-of-range values wrap around."""',
            f"{i1}return cls(value)",
            "",
            "def value(self) -> int:",
            f'{i1}"""Return the raw {backing} value."""',
            f"{i1}return self._value",
        ]

    # === Conversions ===

    def _generate_int_conversion(self, name: str) -> list[str]:
        i1 = self._i(1)
        return [
            "@classmethod",
            f'def from_value(cls, value: int) -> "{name}":',
            f"{i1}return cls(value)",
            "",
            "def __int__(self) -> int:",
            f"{i1}return self._value",
            "",
            "def __index__(self) -> int:",
            f"{i1}return self._value",
        ]

    def _generate_str_conversion(self, name: str, table: ir.DiscriminantTable) -> list[str]:
        i1, i2 = self._i(1), self._i(2)
        lines = [
            "@classmethod",
            f'def from_name(cls, name: str) -> "{name}":',
        ]
        for variant in table.entries:
            lines += [
                f'{i1}if name == "{variant}":',
                f"{i2}return cls.{variant}",
            ]
        lines += [
            f"{i1}raise {name}UnrecognizedName(name)",
            "",
            "def to_name(self) -> str:",
        ]
        for variant in table.entries:
            lines += [
                f"{i1}if self._value == {name}.{variant}._value:",
                f'{i2}return "{variant}"',
            ]
        lines.append(f"{i1}raise {name}UnrecognizedValue(self._value)")
        return lines

    # === Optional behaviors ===

    def _generate_debug(self, name: str, table: ir.DiscriminantTable) -> list[str]:
        i1, i2 = self._i(1), self._i(2)
        lines = ["def __repr__(self) -> str:"]
        for variant in table.entries:
            lines += [
                f"{i1}if self._value == {name}.{variant}._value:",
                f'{i2}return "{variant}"',
            ]
        lines.append(f'{i1}return f"{name}({{self._value!r}})"')
        return lines

    def _generate_default(self, name: str, table: ir.DiscriminantTable) -> list[str]:
        i1 = self._i(1)
        if table.default_variant is None:
            value = "0"
        else:
            value = f"cls.{table.default_variant}.value()"
        return [
            "@classmethod",
            f'def default(cls) -> "{name}":',
            f"{i1}return cls({value})",
        ]

    # === Module-level statements ===

    def _generate_constants(self, name: str, table: ir.DiscriminantTable) -> list[str]:
        return [
            f"{name}.{variant} = {name}({discriminant.expr})"
            for variant, discriminant in table.entries.items()
        ]

    def _generate_shadow(self, name: str, table: ir.DiscriminantTable) -> list[str]:
        i1, i2 = self._i(1), self._i(2)
        lines = [
            "if typing.TYPE_CHECKING:",
            "",
            f"{i1}class _{name}Shadow(enum.Enum):",
        ]
        if not table.entries:
            lines.append(f"{i2}pass")
        for variant, discriminant in table.entries.items():
            lines.append(f"{i2}{variant} = {discriminant.expr}")
        return lines


def _tuple_literal(items: tuple[str, ...] | list[str]) -> str:
    if not items:
        return "()"
    quoted = ", ".join(repr(item) for item in items)
    if len(items) == 1:
        return f"({quoted},)"
    return f"({quoted})"
