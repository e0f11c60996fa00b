"""
Integer expression folding for discriminants.

Discriminants are Python expression source. When an expression is built
only from integer literals and integer operators it is folded to a value;
anything else stays symbolic and is left for the interpreter that imports
the synthesized code.
"""

from __future__ import annotations

import ast
import operator
from collections.abc import Callable

from . import ir

# Guards against pathological constant expressions
MAX_SHIFT = 1024
MAX_EXPONENT = 256
MAX_BITS = 1024

_BINARY_OPS: dict[type[ast.operator], Callable[[int, int], int]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
    ast.LShift: operator.lshift,
    ast.RShift: operator.rshift,
    ast.BitAnd: operator.and_,
    ast.BitOr: operator.or_,
    ast.BitXor: operator.xor,
}

_UNARY_OPS: dict[type[ast.unaryop], Callable[[int], int]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
    ast.Invert: operator.invert,
}


class _NotFoldable(Exception):
    pass


def _evaluate(node: ast.AST) -> int:
    if isinstance(node, ast.Expression):
        return _evaluate(node.body)

    if isinstance(node, ast.Constant):
        # bool is an int subclass but never a valid discriminant literal
        if type(node.value) is int:
            return _bounded(node.value)
        raise _NotFoldable

    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _bounded(_UNARY_OPS[type(node.op)](_evaluate(node.operand)))

    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left = _evaluate(node.left)
        right = _evaluate(node.right)
        if isinstance(node.op, (ast.LShift, ast.RShift)) and not 0 <= right <= MAX_SHIFT:
            raise _NotFoldable
        if isinstance(node.op, ast.LShift) and left.bit_length() + right > MAX_BITS:
            raise _NotFoldable
        if isinstance(node.op, ast.Pow):
            if not 0 <= right <= MAX_EXPONENT:
                raise _NotFoldable
            if abs(left) > 1 and (abs(left).bit_length() - 1) * right > MAX_BITS:
                raise _NotFoldable
        if isinstance(node.op, (ast.FloorDiv, ast.Mod)) and right == 0:
            raise _NotFoldable
        return _bounded(_BINARY_OPS[type(node.op)](left, right))

    raise _NotFoldable


def _bounded(value: int) -> int:
    # Every intermediate result stays within MAX_BITS
    if value.bit_length() > MAX_BITS:
        raise _NotFoldable
    return value


def fold(expr: str) -> int | None:
    """
    Fold an integer expression to its value.

    Args:
        expr: Python expression source, e.g. '0b11' or '1 << 10'

    Returns:
        The integer value, or None if the expression is not a pure
        integer expression
    """
    try:
        tree = ast.parse(expr.strip(), mode="eval")
    except SyntaxError:
        return None

    try:
        return _evaluate(tree)
    except _NotFoldable:
        return None


def literal(value: int, *, fold_constants: bool = True) -> ir.Discriminant:
    """Build a discriminant for a known integer value."""
    return ir.Discriminant(expr=str(value), value=value if fold_constants else None)


def explicit(expr: str, *, fold_constants: bool = True) -> ir.Discriminant:
    """Build a discriminant from an explicit expression as written."""
    expr = expr.strip()
    return ir.Discriminant(expr=expr, value=fold(expr) if fold_constants else None)


def successor(previous: ir.Discriminant, *, fold_constants: bool = True) -> ir.Discriminant:
    """
    Return the running value that follows an assigned discriminant.

    A folded value yields the next literal; otherwise the result is the
    symbolic expression '(previous) + 1'.
    """
    if fold_constants and previous.value is not None:
        return literal(previous.value + 1)
    return ir.Discriminant(expr=f"({previous.expr}) + 1")
