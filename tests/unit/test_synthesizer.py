"""
Tests for the code synthesizer.

Most tests build a declaration from source text, render the module and
execute it, then exercise the generated wrapper directly.
"""

import copy

import pytest

from structify.core import ir
from structify.core.classifier import classify_attributes
from structify.core.config import TransformConfig
from structify.core.discriminants import assign_discriminants
from structify.core.representation import resolve_representation
from structify.core.synthesizer import CodeSynthesizer


class TestFragmentStructure:
    """Test the shape of the synthesized fragment."""

    def _synthesize(self, declaration: ir.EnumDeclaration, **kwargs) -> ir.SynthesizedFragment:
        classified = classify_attributes(declaration.attributes)
        return CodeSynthesizer(**kwargs).synthesize(
            declaration,
            resolve_representation(classified.hints),
            assign_discriminants(declaration.variants),
            classified.capabilities,
        )

    def test_declaration_order(self, color_declaration: ir.EnumDeclaration) -> None:
        fragment = self._synthesize(color_declaration)
        kind = ir.DeclarationKind
        assert fragment.kinds() == [
            kind.ERROR_TYPE,
            kind.WRAPPER,
            kind.INHERENT,
            kind.INT_CONVERSION,
            kind.STR_CONVERSION,
            kind.DEBUG,
            kind.DEFAULT,
            kind.CONSTANTS,
            kind.SHADOW,
        ]

    def test_optional_declarations_omitted(self) -> None:
        declaration = ir.EnumDeclaration(name="Bare", variants=[ir.Variant(name="A")])
        fragment = self._synthesize(declaration, emit_shadow=False)
        assert ir.DeclarationKind.DEBUG not in fragment.kinds()
        assert ir.DeclarationKind.DEFAULT not in fragment.kinds()
        assert ir.DeclarationKind.SHADOW not in fragment.kinds()
        assert fragment.imports == ("typing",)

    def test_empty_declaration_has_no_constants(self) -> None:
        fragment = self._synthesize(ir.EnumDeclaration(name="Empty"))
        assert fragment.get(ir.DeclarationKind.CONSTANTS) is None

    def test_public_declaration_exports_wrapper_and_errors(
        self, color_declaration: ir.EnumDeclaration
    ) -> None:
        fragment = self._synthesize(color_declaration)
        assert fragment.exports == (
            "Color",
            "ColorConversionError",
            "ColorUnrecognizedValue",
            "ColorUnrecognizedName",
        )

    def test_private_declaration_exports_nothing(self) -> None:
        fragment = self._synthesize(ir.EnumDeclaration(name="Hidden"))
        assert fragment.exports == ()

    def test_pointer_width_imports_ctypes(self) -> None:
        declaration = ir.EnumDeclaration(
            name="Handle", attributes=[ir.Attribute(name="repr", args="usize")]
        )
        fragment = self._synthesize(declaration)
        assert "ctypes" in fragment.imports
        wrapper = fragment.get(ir.DeclarationKind.WRAPPER)
        assert wrapper is not None
        assert "ctypes.sizeof(ctypes.c_size_t) * 8" in wrapper.source

    def test_constants_keep_expression_as_written(self) -> None:
        declaration = ir.EnumDeclaration(
            name="Flags", variants=[ir.Variant(name="Big", discriminant="1 << 10")]
        )
        constants = self._synthesize(declaration).get(ir.DeclarationKind.CONSTANTS)
        assert constants is not None
        assert constants.source == "Flags.Big = Flags(1 << 10)"

    def test_custom_indent(self, color_declaration: ir.EnumDeclaration) -> None:
        rendered = self._synthesize(color_declaration, indent="\t").render()
        assert "\n\tdef value(self) -> int:" in rendered


class TestGeneratedWrapper:
    """Test the behavior of executed wrappers."""

    def test_constants_and_values(self, build) -> None:
        module = build("enum Foo { A, B = 0b11, C, D = 1 << 10 }")
        assert [module.Foo.A.value(), module.Foo.B.value()] == [0, 3]
        assert [module.Foo.C.value(), module.Foo.D.value()] == [4, 1024]

    def test_equality_by_raw_value(self, build) -> None:
        module = build("enum Foo { A, B }")
        assert module.Foo.new(1) == module.Foo.B
        assert module.Foo.new(0) != module.Foo.B
        assert module.Foo.A != 0

    def test_unnamed_values_are_representable(self, build) -> None:
        module = build("enum Foo { A, B }")
        unknown = module.Foo.new(99)
        assert unknown.value() == 99
        assert unknown not in (module.Foo.A, module.Foo.B)

    def test_integer_conversion_round_trip(self, build) -> None:
        module = build("enum Foo { A, B = 7 }")
        assert int(module.Foo.from_value(7)) == 7
        assert module.Foo.from_value(7) == module.Foo.B
        assert [10, 20, 30][module.Foo.new(1)] == 20

    def test_debug_names_known_values(self, build) -> None:
        module = build("#[derive(Debug)] enum Foo { A = 1 }")
        assert repr(module.Foo.new(1)) == "A"
        assert repr(module.Foo.new(2)) == "Foo(2)"

    def test_debug_absent_without_capability(self, build) -> None:
        module = build("enum Foo { A }")
        assert "__repr__" not in vars(module.Foo)

    def test_default_is_first_variant(self, build) -> None:
        module = build("#[derive(Default)] enum Foo { A = -1, B }")
        assert module.Foo.default().value() == -1

    def test_default_of_empty_declaration_is_zero(self, build) -> None:
        module = build("#[derive(Default)] enum Foo {}")
        assert module.Foo.default().value() == 0

    def test_hash_only_when_requested(self, build) -> None:
        module = build("enum Plain { A } #[derive(Hash)] enum Keyed { A }")
        with pytest.raises(TypeError):
            hash(module.Plain.A)
        assert {module.Keyed.A: "a"}[module.Keyed.new(0)] == "a"

    def test_ordering(self, build) -> None:
        module = build("#[derive(PartialOrd, Ord)] enum Level { Low, High = 10 }")
        assert module.Level.Low < module.Level.High
        assert module.Level.new(10) >= module.Level.High
        low, high = module.Level.Low, module.Level.High
        assert sorted([high, low]) == [low, high]

    def test_no_ordering_without_capability(self, build) -> None:
        module = build("enum Level { Low, High }")
        with pytest.raises(TypeError):
            _ = module.Level.Low < module.Level.High

    def test_copy_returns_same_instance(self, build) -> None:
        module = build("#[derive(Clone, Copy)] enum Foo { A }")
        value = module.Foo.new(5)
        assert copy.copy(value) is value
        assert copy.deepcopy(value) is value
        assert value.clone() == value
        assert value.clone() is not value

    def test_capabilities_recorded_on_class(self, build) -> None:
        module = build("#[derive(Hash, Debug)] enum Foo { A }")
        assert module.Foo.__capabilities__ == ("equality-comparison", "hashing", "debug-formatting")

    def test_representation_metadata(self, build) -> None:
        module = build("#[repr(C, u16)] enum Foo { A }")
        assert module.Foo.__backing__ == "u16"
        assert module.Foo.__bits__ == 16
        assert module.Foo.__signed__ is False
        assert module.Foo.__repr_hints__ == ("C",)
        assert module.Foo.__transparent__ is True

    def test_transparent_fallback_metadata(self, build) -> None:
        module = build("#[repr(transparent)] #[repr(u8)] enum Foo { A }")
        assert module.Foo.__backing__ == "i32"
        assert module.Foo.__transparent__ is False

    @pytest.mark.parametrize(
        ("backing", "raw", "expected"),
        [
            ("u8", 256, 0),
            ("u8", -1, 255),
            ("i8", 128, -128),
            ("i8", 255, -1),
            ("u64", -1, 2**64 - 1),
            ("i32", 2**31, -(2**31)),
        ],
    )
    def test_values_wrap_to_backing_width(self, build, backing, raw, expected) -> None:
        module = build(f"#[repr({backing})] enum Foo {{ A }}")
        assert module.Foo.new(raw).value() == expected

    def test_pointer_width_backing(self, build) -> None:
        module = build("#[repr(usize)] enum Handle { Null }")
        assert module.Handle.__bits__ in (32, 64)
        assert module.Handle.new(-1).value() == 2**module.Handle.__bits__ - 1

    def test_symbolic_discriminants_evaluate_at_import(self, render, load) -> None:
        source = render("enum Foo { A = BASE, B }", TransformConfig(emit_shadow=False))

        with pytest.raises(NameError):
            load(source)
        module = load(source, BASE=40)
        assert module.Foo.B.value() == 41


class TestNameConversions:
    """Test conversions between wrappers and variant names."""

    def test_round_trip(self, build) -> None:
        module = build("enum Foo { A, B = 5 }")
        for name in ("A", "B"):
            assert module.Foo.from_name(name).to_name() == name

    def test_unknown_name(self, build) -> None:
        module = build("enum Foo { A }")
        with pytest.raises(module.FooUnrecognizedName) as exc_info:
            module.Foo.from_name("Z")
        assert exc_info.value.name == "Z"
        assert isinstance(exc_info.value, module.FooConversionError)
        assert isinstance(exc_info.value, ValueError)

    def test_unknown_value(self, build) -> None:
        module = build("enum Foo { A }")
        with pytest.raises(module.FooUnrecognizedValue) as exc_info:
            module.Foo.new(3).to_name()
        assert exc_info.value.value == 3
        assert "unrecognized Foo value: 3" in str(exc_info.value)

    def test_duplicate_values_resolve_to_first_name(self, build) -> None:
        module = build("enum Foo { A, B = 0 }")
        assert module.Foo.B.to_name() == "A"

    def test_empty_declaration_rejects_everything(self, build) -> None:
        module = build("enum Foo {}")
        with pytest.raises(module.FooUnrecognizedName):
            module.Foo.from_name("A")
        with pytest.raises(module.FooUnrecognizedValue):
            module.Foo.new(0).to_name()


class TestShadow:
    """Test the static-checker shadow enumeration."""

    def test_shadow_behind_type_checking(self, build) -> None:
        module = build("enum Foo { A, B }")
        assert not hasattr(module, "_FooShadow")

    def test_shadow_source(self, render) -> None:
        source = render("enum Foo { A, B = 7 }")
        assert "if typing.TYPE_CHECKING:" in source
        assert "class _FooShadow(enum.Enum):" in source
        assert "        A = 0\n        B = 7\n" in source

    def test_shadow_disabled(self, render) -> None:
        source = render("enum Foo { A }", TransformConfig(emit_shadow=False))
        assert "_FooShadow" not in source
        assert "import enum" not in source
