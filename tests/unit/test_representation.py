"""Tests for representation resolution."""

import pytest

from structify.core import ir
from structify.core.errors import ConflictingRepresentation
from structify.core.representation import resolve_representation


class TestResolveRepresentation:
    """Test backing type selection and residual hints."""

    def test_no_hints_defaults_to_i32(self) -> None:
        resolved = resolve_representation([])
        assert resolved.backing == ir.IntegerType.I32
        assert resolved.residual_hints == ()
        assert resolved.transparent is False

    @pytest.mark.parametrize("integer_type", list(ir.IntegerType))
    def test_single_type_hint_selects_type(self, integer_type: ir.IntegerType) -> None:
        resolved = resolve_representation([integer_type.value])
        assert resolved.backing == integer_type
        assert resolved.transparent is True

    def test_other_hints_preserved(self) -> None:
        resolved = resolve_representation(["C", "i64", "align(8)"])
        assert resolved.backing == ir.IntegerType.I64
        assert resolved.residual_hints == ("C", "align(8)")

    def test_two_type_hints_conflict(self) -> None:
        with pytest.raises(ConflictingRepresentation, match="i32 and i64"):
            resolve_representation(["i32", "i64"])

    def test_same_type_twice_conflicts(self) -> None:
        with pytest.raises(ConflictingRepresentation):
            resolve_representation(["u8", "u8"])

    def test_transparent_with_type_falls_back_to_default(self) -> None:
        resolved = resolve_representation(["transparent", "u16"])
        assert resolved.backing == ir.IntegerType.I32
        assert resolved.transparent is False
        assert resolved.residual_hints == ()

    def test_transparent_order_does_not_matter(self) -> None:
        resolved = resolve_representation(["u16", "transparent"])
        assert resolved.backing == ir.IntegerType.I32

    def test_transparent_with_other_hint_conflicts(self) -> None:
        with pytest.raises(ConflictingRepresentation, match="transparent"):
            resolve_representation(["C", "transparent"])

    def test_repeated_transparent_conflicts(self) -> None:
        with pytest.raises(ConflictingRepresentation):
            resolve_representation(["transparent", "transparent"])

    def test_error_carries_declaration_location(self) -> None:
        location = ir.SourceLocation(file="flags.rs", line=2, column=1)
        with pytest.raises(ConflictingRepresentation) as exc_info:
            resolve_representation(["i8", "u8"], location)
        assert "flags.rs:2:1" in str(exc_info.value)


class TestIntegerType:
    """Test backing type properties."""

    def test_widths(self) -> None:
        assert ir.IntegerType.U8.bits == 8
        assert ir.IntegerType.I128.bits == 128
        assert ir.IntegerType.USIZE.bits is None

    def test_signedness(self) -> None:
        assert ir.IntegerType.I16.signed
        assert not ir.IntegerType.U16.signed
        assert ir.IntegerType.ISIZE.signed

    def test_lookup(self) -> None:
        assert ir.IntegerType.lookup("u64") == ir.IntegerType.U64
        assert ir.IntegerType.lookup("C") is None


class TestValueRange:
    """Test the discriminant range of each backing type."""

    @pytest.mark.parametrize(
        ("integer_type", "low", "high"),
        [
            (ir.IntegerType.I8, -128, 127),
            (ir.IntegerType.U8, 0, 255),
            (ir.IntegerType.I32, -(2**31), 2**31 - 1),
            (ir.IntegerType.U128, 0, 2**128 - 1),
            (ir.IntegerType.ISIZE, -(2**63), 2**63 - 1),
            (ir.IntegerType.USIZE, 0, 2**64 - 1),
        ],
    )
    def test_bounds(self, integer_type: ir.IntegerType, low: int, high: int) -> None:
        allowed = integer_type.value_range
        assert allowed[0] == low
        assert allowed[-1] == high
        assert low - 1 not in allowed
        assert high + 1 not in allowed
