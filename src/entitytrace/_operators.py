"""Operator symbols, native value kinds and entity kinds.

Enum members carry a docstring, following the string-enum-with-doc pattern:
https://guicommits.com/add-docstrings-python-enum-members/
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum, StrEnum
from typing import Self


class Operator(StrEnum):
    """Infix operators understood by the expression builder.

    The member value is the literal symbol rendered in names and expressions.
    """

    def __new__(cls, value: str, precedence: int, doc: str = "") -> Self:
        """Create a new operator member with its precedence rank and docstring."""
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.precedence = precedence
        obj.__doc__ = doc
        return obj

    precedence: int

    MULTIPLY = "*", 5, "Multiplication, capability `Multiplicable`."
    DIVIDE = "/", 5, "Division, capability `Dividable`."
    ADD = "+", 4, "Addition or text concatenation, capability `Addable`."
    SUBTRACT = "-", 4, "Subtraction, capability `Subtractable`."
    GREATER = ">", 3, "Greater than, capability `Orderable`."
    LESS = "<", 3, "Less than, capability `Orderable`."
    GREATER_EQUAL = ">=", 3, "Greater than or equal, capability `Orderable`."
    LESS_EQUAL = "<=", 3, "Less than or equal, capability `Orderable`."
    EQUAL = "==", 2, "Value equality, legal for every type."
    NOT_EQUAL = "!=", 2, "Value inequality, legal for every type."
    AND = "&", 1, "Logical and, capability `Logical`."
    OR = "|", 0, "Logical or, capability `Logical`."

    @classmethod
    def from_label(cls, label: str) -> Operator | None:
        """Return the operator for an infix label, or None for function-form labels."""
        try:
            return cls(label)
        except ValueError:
            return None

    @property
    def is_associative(self) -> bool:
        """Whether `a op (b op c)` may be rendered without parentheses."""
        return self in {Operator.MULTIPLY, Operator.ADD, Operator.AND, Operator.OR}


ORDERING_OPERATORS = frozenset({Operator.GREATER, Operator.LESS, Operator.GREATER_EQUAL, Operator.LESS_EQUAL})


class NativeKind(Enum):
    """Value types served by the built-in fast path."""

    INT = "int"
    DECIMAL = "decimal"
    FLOAT = "float"
    BOOL = "bool"
    TEXT = "text"

    @classmethod
    def of(cls, value_type: type) -> NativeKind | None:
        """Return the native kind for an exact value type.

        Subclasses are not native: `bool` is BOOL, never INT.
        """
        return _NATIVE_KINDS.get(value_type)

    @property
    def is_numeric(self) -> bool:
        return self in {NativeKind.INT, NativeKind.DECIMAL, NativeKind.FLOAT}


_NATIVE_KINDS: dict[type, NativeKind] = {
    int: NativeKind.INT,
    Decimal: NativeKind.DECIMAL,
    float: NativeKind.FLOAT,
    bool: NativeKind.BOOL,
    str: NativeKind.TEXT,
}


class EntityKind(StrEnum):
    """The two entity variants."""

    LEAF = "leaf"
    DERIVED = "derived"
