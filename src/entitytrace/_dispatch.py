"""Capability dispatch: choosing the implementation of an operator for a value type.

Resolution order:
1. Native fast path: exact `int`, `Decimal`, `float`, `bool` or `str` operands
   use a per-kind table of plain functions.
2. Capability fallback: the left operand's type subclasses the capability ABC
   for the operator, and the resolved left value supplies the implementation.
   Ordering also accepts any type that defines its own rich comparison
   (`date`, `Fraction`, `functools.total_ordering` classes).
3. Otherwise UnsupportedOperationError, naming the capability to implement.

The functions here only decide. They return the binary function a derived
entity's compute closure applies to the resolved operands.
"""

import logging
import numbers
import operator as op
from collections.abc import Callable
from typing import Any

from ._capabilities import Addable, Dividable, Logical, Multiplicable, Orderable, Subtractable
from ._errors import UnsupportedOperationError
from ._operators import ORDERING_OPERATORS, NativeKind, Operator

logger = logging.getLogger(__name__)

type BinaryFunction = Callable[[Any, Any], Any]

_NUMERIC_KINDS = (NativeKind.INT, NativeKind.DECIMAL, NativeKind.FLOAT)


def _truncating_div(left: int, right: int) -> int:
    """Integer division rounding toward zero, so `-7 / 2` is `-3`."""
    quotient = left // right
    if quotient < 0 and quotient * right != left:
        quotient += 1
    return quotient


_NATIVE_OPERATIONS: dict[tuple[NativeKind, Operator], BinaryFunction] = {
    **{(kind, Operator.ADD): op.add for kind in _NUMERIC_KINDS},
    **{(kind, Operator.SUBTRACT): op.sub for kind in _NUMERIC_KINDS},
    **{(kind, Operator.MULTIPLY): op.mul for kind in _NUMERIC_KINDS},
    (NativeKind.INT, Operator.DIVIDE): _truncating_div,
    (NativeKind.DECIMAL, Operator.DIVIDE): op.truediv,
    (NativeKind.FLOAT, Operator.DIVIDE): op.truediv,
    (NativeKind.TEXT, Operator.ADD): op.add,
    # Both operands are always resolved, so these never short-circuit
    (NativeKind.BOOL, Operator.AND): op.and_,
    (NativeKind.BOOL, Operator.OR): op.or_,
}

_ORDERING_PREDICATES: dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.GREATER: op.gt,
    Operator.LESS: op.lt,
    Operator.GREATER_EQUAL: op.ge,
    Operator.LESS_EQUAL: op.le,
}

_CAPABILITIES: dict[Operator, tuple[type, BinaryFunction]] = {
    Operator.ADD: (Addable, lambda left, right: left.add(left, right)),
    Operator.SUBTRACT: (Subtractable, lambda left, right: left.subtract(left, right)),
    Operator.MULTIPLY: (Multiplicable, lambda left, right: left.multiply(left, right)),
    Operator.DIVIDE: (Dividable, lambda left, right: left.divide(left, right)),
    Operator.AND: (Logical, lambda left, right: left.and_(left, right)),
    Operator.OR: (Logical, lambda left, right: left.or_(left, right)),
}

_NATIVE_TYPE_NAMES: dict[NativeKind, str] = {
    NativeKind.INT: "int",
    NativeKind.DECIMAL: "Decimal",
    NativeKind.FLOAT: "float",
    NativeKind.BOOL: "bool",
    NativeKind.TEXT: "str",
}


def _supported_native_names(operator: Operator) -> list[str]:
    if operator in ORDERING_OPERATORS:
        return [_NATIVE_TYPE_NAMES[kind] for kind in NativeKind]
    return [_NATIVE_TYPE_NAMES[kind] for kind in NativeKind if (kind, operator) in _NATIVE_OPERATIONS]


def unsupported_message(operator: Operator, value_type: type, capability: type) -> str:
    """Build the diagnostic for an operator with no implementation.

    Example:
        >>> unsupported_message(Operator.ADD, complex, Addable)
        'Operator + not supported for type complex. Supported types: int, Decimal, float, str, or types implementing Addable'

    """
    natives = ", ".join(_supported_native_names(operator))
    return (
        f"Operator {operator} not supported for type {value_type.__name__}. "
        f"Supported types: {natives}, or types implementing {capability.__name__}"
    )


def _check_native_pair(operator: Operator, left_type: type, right_type: type) -> NativeKind | None:
    """Return the shared native kind of both operands, or None when the left type is not native."""
    left_kind = NativeKind.of(left_type)
    if left_kind is None:
        return None
    if NativeKind.of(right_type) is not left_kind:
        msg = (
            f"Operator {operator} requires operands of the same type, "
            f"got {left_type.__name__} and {right_type.__name__}"
        )
        raise UnsupportedOperationError(msg)
    return left_kind


def resolve_binary(operator: Operator, left_type: type, right_type: type) -> BinaryFunction:
    """Choose the implementation of an arithmetic or logical operator.

    Args:
        operator: One of `+`, `-`, `*`, `/`, `&`, `|`.
        left_type: Value type of the left operand.
        right_type: Value type of the right operand.

    Returns:
        A function of the two resolved operand values.

    Raises:
        UnsupportedOperationError: If neither the native table nor a capability applies.

    """
    capability, via_capability = _CAPABILITIES[operator]

    kind = _check_native_pair(operator, left_type, right_type)
    if kind is not None:
        native = _NATIVE_OPERATIONS.get((kind, operator))
        if native is not None:
            return native
    elif issubclass(left_type, capability):
        logger.debug("Dispatching %s for %s via %s", operator, left_type.__name__, capability.__name__)
        return via_capability

    raise UnsupportedOperationError(unsupported_message(operator, left_type, capability))


def resolve_ordering(operator: Operator, left_type: type, right_type: type) -> Callable[[Any, Any], bool]:
    """Choose the implementation of `>`, `<`, `>=` or `<=`.

    Native kinds compare directly. Other types use `Orderable.compare_to` when
    they implement it, and their own rich comparison otherwise.

    Raises:
        UnsupportedOperationError: If the type has no ordering.

    """
    predicate = _ORDERING_PREDICATES[operator]

    if _check_native_pair(operator, left_type, right_type) is not None:
        return predicate
    if issubclass(left_type, Orderable):
        return lambda left, right: predicate(left.compare_to(right), 0)
    if _has_rich_ordering(left_type):
        logger.debug("Dispatching %s for %s via rich comparison", operator, left_type.__name__)
        return predicate

    raise UnsupportedOperationError(unsupported_message(operator, left_type, Orderable))


def _has_rich_ordering(value_type: type) -> bool:
    """Whether the type defines `<` and `>` itself instead of inheriting them from `object`.

    Complex numbers define the comparison slots but never order, so they are excluded.
    """
    if issubclass(value_type, numbers.Complex) and not issubclass(value_type, numbers.Real):
        return False
    return value_type.__lt__ is not object.__lt__ and value_type.__gt__ is not object.__gt__
