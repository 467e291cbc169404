"""Capability interfaces a custom value type may implement.

A value type opts into an operator by subclassing the matching capability.
The resolved left operand supplies the implementation and receives both
operands, so a type can enforce its own invariants (e.g. matching currencies)
by raising a domain error.

Example:
    >>> class Vector2D(Addable, Subtractable):
    ...     def __init__(self, x, y):
    ...         self.x, self.y = x, y
    ...     def add(self, left, right):
    ...         return Vector2D(left.x + right.x, left.y + right.y)
    ...     def subtract(self, left, right):
    ...         return Vector2D(left.x - right.x, left.y - right.y)

"""

from abc import ABC, abstractmethod
from typing import Self


class Addable(ABC):
    """Implement to support the `+` operator."""

    @abstractmethod
    def add(self, left: Self, right: Self) -> Self: ...


class Subtractable(ABC):
    """Implement to support the `-` operator."""

    @abstractmethod
    def subtract(self, left: Self, right: Self) -> Self: ...


class Multiplicable(ABC):
    """Implement to support the `*` operator."""

    @abstractmethod
    def multiply(self, left: Self, right: Self) -> Self: ...


class Dividable(ABC):
    """Implement to support the `/` operator."""

    @abstractmethod
    def divide(self, left: Self, right: Self) -> Self: ...


class Logical(ABC):
    """Implement to support the `&` and `|` operators."""

    @abstractmethod
    def and_(self, left: Self, right: Self) -> Self: ...

    @abstractmethod
    def or_(self, left: Self, right: Self) -> Self: ...


class Arithmetic(Addable, Subtractable, Multiplicable, Dividable):
    """Combines all arithmetic capabilities (`+`, `-`, `*`, `/`)."""


class Orderable(ABC):
    """Implement to support `>`, `<`, `>=` and `<=`.

    `compare_to` is a three-way comparison: negative when `self` orders
    before `other`, zero when equal, positive otherwise.
    """

    @abstractmethod
    def compare_to(self, other: Self) -> int: ...
