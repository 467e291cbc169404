"""Name and dependency-expression rendering for entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._operators import Operator

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._entity import Entity


def build_name(operation: str, operands: Sequence[Entity[Any]]) -> str:
    """Build the structural name of a derived entity from its operands' names.

    Examples:
        `Round(Price)`, `A + B`, `Combine(FirstName, LastName)`.

    """
    names = [operand.name for operand in operands]
    if len(names) == 2 and Operator.from_label(operation) is not None:
        return f"{names[0]} {operation} {names[1]}"
    return f"{operation}({', '.join(names)})"


def _needs_parentheses(child: Operator, parent: Operator, *, right_side: bool) -> bool:
    if child.precedence < parent.precedence:
        return True
    # a - (b - c), a / (b * c), (a == b) == c on the right
    return right_side and child.precedence == parent.precedence and not parent.is_associative


def build_expression(entity: Entity[Any], parent: Operator | None = None, *, right_side: bool = False) -> str:
    """Render the dependency expression of an entity with real operator precedence.

    Args:
        entity: The entity to render.
        parent: Operator of the enclosing infix expression, None at the root.
        right_side: Whether the entity is the right operand of `parent`.

    Returns:
        The expression, e.g. `(A + B) * C` or `Price (when Open & Staffed)`.

    """
    if entity.is_leaf:
        if not entity.conditions:
            return entity.name
        conditions = " & ".join(condition.name for condition in entity.conditions)
        return f"{entity.name} (when {conditions})"

    operation = entity.operation
    operands = entity.operands
    operator = Operator.from_label(operation)

    if operator is not None and len(operands) == 2:
        left = build_expression(operands[0], operator)
        right = build_expression(operands[1], operator, right_side=True)
        expression = f"{left} {operator} {right}"
        if parent is not None and _needs_parentheses(operator, parent, right_side=right_side):
            return f"({expression})"
        return expression

    arguments = ", ".join(build_expression(operand) for operand in operands)
    return f"{operation}({arguments})"
