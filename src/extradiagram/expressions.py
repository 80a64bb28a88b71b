"""Named style values and the sandboxed expression evaluator.

Style sheets may hold values that have no string form, such as callables
used by the renderer. StyleRegistry maps those values to names so they
can be written to and read from XML.

evaluate() is used for the text content of style sheet entries when
allow_eval is set. It accepts literals, arithmetic and bitwise operators,
comparisons and names from an explicit table. Calls, attribute access on
objects, subscripts and comprehensions are rejected.
"""

from __future__ import annotations

import ast
import operator
from collections.abc import Callable, Mapping
from typing import Any

from .exceptions import ExpressionError


class StyleRegistry:
    """Two-way table between names and non-primitive style values."""

    def __init__(self) -> None:
        self.values: dict[str, Any] = {}

    def put_value(self, name: str, value: Any) -> None:
        self.values[name] = value

    def get_value(self, name: str) -> Any:
        return self.values.get(name)

    def get_name(self, value: Any) -> str | None:
        """Return the name registered for value (by identity), if any."""
        for name, registered in self.values.items():
            if registered is value:
                return name
        return None


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

# Longest str, list or tuple a repetition may build
MAX_REPEAT_LENGTH = 1_000_000

_BINARY_OPS: dict[type[ast.operator], Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.BitOr: operator.or_,
    ast.BitAnd: operator.and_,
    ast.BitXor: operator.xor,
}

_UNARY_OPS: dict[type[ast.unaryop], Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
    ast.Not: operator.not_,
    ast.Invert: operator.invert,
}

_COMPARE_OPS: dict[type[ast.cmpop], Callable[[Any, Any], Any]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
}


def evaluate(text: str, names: Mapping[str, Any] | None = None) -> Any:
    """Evaluate an expression restricted to literals, operators and names.

    Args:
        text: The expression source
        names: Values that (dotted) names in the expression may refer to

    Raises:
        ExpressionError: If the expression is malformed, uses a construct
            outside the allow-list or fails while evaluating
    """
    try:
        tree = ast.parse(text.strip(), mode="eval")
    except SyntaxError as e:
        raise ExpressionError(f"Invalid expression: {text!r}") from e

    try:
        return _eval_node(tree.body, names or {})
    except ExpressionError:
        raise
    except (ArithmeticError, MemoryError, TypeError, ValueError) as e:
        raise ExpressionError(f"Failed to evaluate {text!r}: {e}") from e


def _eval_node(node: ast.AST, names: Mapping[str, Any]) -> Any:
    if isinstance(node, ast.Constant):
        if isinstance(node.value, str | int | float | bool) or node.value is None:
            return node.value
        raise ExpressionError(f"Unsupported literal: {node.value!r}")

    if isinstance(node, ast.Name | ast.Attribute):
        name = _dotted_name(node)
        if name not in names:
            raise ExpressionError(f"Unknown name: {name}")
        return names[name]

    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand, names))

    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left = _eval_node(node.left, names)
        right = _eval_node(node.right, names)
        if isinstance(node.op, ast.Mult):
            _check_repetition(left, right)
        return _BINARY_OPS[type(node.op)](left, right)

    if isinstance(node, ast.BoolOp):
        # "and" returns the first falsy operand, "or" the first truthy one
        stop_when = not isinstance(node.op, ast.And)
        value = None
        for operand in node.values:
            value = _eval_node(operand, names)
            if bool(value) is stop_when:
                return value
        return value

    if isinstance(node, ast.Compare):
        left = _eval_node(node.left, names)
        for op, comparator in zip(node.ops, node.comparators):
            if type(op) not in _COMPARE_OPS:
                raise ExpressionError(f"Unsupported comparison: {type(op).__name__}")
            right = _eval_node(comparator, names)
            if not _COMPARE_OPS[type(op)](left, right):
                return False
            left = right
        return True

    if isinstance(node, ast.Tuple | ast.List):
        items = [_eval_node(e, names) for e in node.elts]
        return tuple(items) if isinstance(node, ast.Tuple) else items

    raise ExpressionError(f"Unsupported expression: {type(node).__name__}")


def _check_repetition(left: Any, right: Any) -> None:
    sequence, count = (left, right) if isinstance(right, int) else (right, left)
    if isinstance(sequence, str | list | tuple) and isinstance(count, int):
        if len(sequence) * count > MAX_REPEAT_LENGTH:
            raise ExpressionError(f"Repetition longer than {MAX_REPEAT_LENGTH} items")


def _dotted_name(node: ast.AST) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return f"{_dotted_name(node.value)}.{node.attr}"
    raise ExpressionError(f"Unsupported name: {type(node).__name__}")
