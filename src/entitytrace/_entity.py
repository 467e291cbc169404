"""Traceable entities: leaf values and the derived entities computed from them."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from rich.console import Console

from ._context import ScopeHandle, enter_scope, get_condition_stack
from ._dispatch import resolve_binary, resolve_ordering
from ._errors import ArgumentInvalidError, ArgumentNullError, InvalidStateError
from ._expression import build_expression, build_name
from ._graph import GraphNode, build_graph, render_graph
from ._operators import ORDERING_OPERATORS, EntityKind, Operator

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

logger = logging.getLogger(__name__)

_EMPTY_STATE: Mapping[str, Any] = MappingProxyType({})


def validate_label(label: object, what: str = "Label") -> str:
    """Check that a name or operation label is a non-blank string.

    Raises:
        ArgumentInvalidError: If the label is None, not a string, or blank.

    """
    if not isinstance(label, str) or not label.strip():
        msg = f"{what} cannot be None or whitespace."
        raise ArgumentInvalidError(msg)
    return label


class Entity[T]:
    """A value that remembers how it was produced.

    A *leaf* entity owns a mutable value and a name. A *derived* entity owns an
    operation label, a fixed tuple of operand entities and a compute closure;
    it is produced by operators (`+`, `-`, `*`, `/`, `&`, `|`, `==`, `!=`, `>`,
    `<`, `>=`, `<=`) or by `transform` / `split`.

    Resolution is lazy and never cached: every `resolve()` walks the operand
    tree, so resetting a leaf changes every dependent result on the next call.

    Equality and hashing follow the resolved value. `a == b` is itself a traced
    operation returning a derived `Entity[bool]`, and the truth value of any
    entity is the truth value of its resolved value, so two unrelated entities
    that currently resolve to equal values compare equal in `if`, `assert` and
    dict lookups.

    Example:
        >>> a = Entity("A", 10)
        >>> b = Entity("B", 5)
        >>> total = a + b
        >>> total.resolve()
        15
        >>> a.reset(20)
        >>> total.resolve()
        25

    """

    _kind: EntityKind
    _name: str
    _value: T
    _value_type: type | None
    _operation: str | None
    _operands: tuple[Entity[Any], ...]
    _compute: Callable[[], T] | None
    _arbitrary_state: Mapping[str, Any]
    _value_state: Mapping[str, T]
    _conditions: tuple[Entity[Any], ...]

    def __init__(
        self,
        name: str,
        value: T,
        *,
        arbitrary_state: Mapping[str, Any] | None = None,
        value_state: Mapping[str, T] | None = None,
        value_type: type | None = None,
    ) -> None:
        """Create a leaf entity.

        Args:
            name: Identifier used in names, expressions and graphs. Must not be blank.
            value: The initial value.
            arbitrary_state: Free-form metadata, copied at construction.
            value_state: Metadata whose values share the entity's value type, copied at construction.
            value_type: The type used for operator dispatch. Defaults to `type(value)`.

        Raises:
            ArgumentInvalidError: If the name is None, not a string, or blank.

        """
        validate_label(name, "Name")
        self._kind = EntityKind.LEAF
        self._name = name
        self._value = value
        self._value_type = value_type if value_type is not None else type(value)
        self._operation = None
        self._operands = ()
        self._compute = None
        self._arbitrary_state = MappingProxyType(dict(arbitrary_state)) if arbitrary_state else _EMPTY_STATE
        self._value_state = MappingProxyType(dict(value_state)) if value_state else _EMPTY_STATE
        self._conditions = get_condition_stack()
        self.description: str | None = None

    @classmethod
    def derive(
        cls,
        operation: str,
        operands: Sequence[Entity[Any]],
        compute: Callable[[], T],
        *,
        value_type: type | None = None,
    ) -> Entity[T]:
        """Create a derived entity.

        Operators and `transform` / `split` use this; the operands must already
        be validated.

        Args:
            operation: Operator symbol or function label.
            operands: The entities the result depends on, in rendering order.
            compute: Zero-argument closure that resolves the operands and applies the operation.
            value_type: The result's type for further dispatch. Inferred from
                the resolved value when None.

        """
        validate_label(operation, "Operation label")
        entity = cls.__new__(cls)
        entity._kind = EntityKind.DERIVED
        entity._operation = str(operation)
        entity._operands = tuple(operands)
        entity._compute = compute
        entity._value_type = value_type
        entity._arbitrary_state = _EMPTY_STATE
        entity._value_state = _EMPTY_STATE
        entity._conditions = ()
        entity._name = build_name(operation, entity._operands)
        entity.description = None
        logger.debug("Derived %r from %d operand(s)", entity._name, len(entity._operands))
        return entity

    # --- Identity and metadata ---

    @property
    def name(self) -> str:
        """The leaf name, or the structural name of a derived entity (e.g. `A + B`)."""
        return self._name

    @property
    def kind(self) -> EntityKind:
        return self._kind

    @property
    def is_leaf(self) -> bool:
        return self._kind is EntityKind.LEAF

    @property
    def operation(self) -> str | None:
        """The operation label, None for leaves."""
        return self._operation

    @property
    def operands(self) -> tuple[Entity[Any], ...]:
        """The operand entities, fixed at construction. Empty for leaves."""
        return self._operands

    @property
    def conditions(self) -> tuple[Entity[Any], ...]:
        """Scope conditions captured when this leaf was constructed, outermost first."""
        return self._conditions

    @property
    def arbitrary_state(self) -> Mapping[str, Any]:
        return self._arbitrary_state

    @property
    def value_state(self) -> Mapping[str, T]:
        return self._value_state

    @property
    def has_arbitrary_state(self) -> bool:
        return len(self._arbitrary_state) > 0

    @property
    def has_value_state(self) -> bool:
        return len(self._value_state) > 0

    @property
    def value_type(self) -> type:
        """The type operators dispatch on.

        For a transform created without `output_type`, the entity is resolved
        to infer it. Operators never call this on such an entity; they choose
        their implementation when resolved instead.
        """
        if self._value_type is None:
            return type(self.resolve())
        return self._value_type

    # --- Evaluation ---

    def resolve(self) -> T:
        """Evaluate the entity.

        A leaf returns its stored value. A derived entity recomputes from its
        operands on every call; errors raised by the computation propagate
        unchanged.
        """
        if self._compute is None:
            return self._value
        return self._compute()

    @property
    def value(self) -> T:
        """The resolved value."""
        return self.resolve()

    def reset(self, new_value: T) -> None:
        """Replace a leaf's value.

        Raises:
            InvalidStateError: If the entity is derived.

        """
        if self._kind is not EntityKind.LEAF:
            msg = "Cannot reset a derived entity. Only leaf entities can be reset."
            raise InvalidStateError(msg)
        self._value = new_value

    reload = reset

    # --- Tracing ---

    @property
    def dependency_expression(self) -> str:
        """The computation rendered with operator precedence, e.g. `(A + B) * C`."""
        return build_expression(self)

    def dependency_names(self) -> list[str]:
        """Names of all leaves this entity depends on, deduplicated in first-seen order.

        Scope conditions of a leaf contribute their own dependency names.
        """
        names: dict[str, None] = {}
        self._collect_dependency_names(names)
        return list(names)

    def _collect_dependency_names(self, names: dict[str, None]) -> None:
        if self._kind is EntityKind.LEAF:
            names[self._name] = None
        for operand in self._operands:
            operand._collect_dependency_names(names)
        for condition in self._conditions:
            condition._collect_dependency_names(names)

    def build_graph(self) -> GraphNode:
        """Take an immutable snapshot of the tree rooted at this entity."""
        return build_graph(self)

    @property
    def graph(self) -> str:
        """The ASCII tree of a fresh snapshot."""
        return render_graph(self.build_graph())

    def print_graph(self, console: Console | None = None) -> None:
        """Print the ASCII tree to the console."""
        if console is None:
            console = Console()
        console.print(self.graph, markup=False, highlight=False, emoji=False, soft_wrap=True)

    # --- Scopes and transforms ---

    def as_scope(self) -> ScopeHandle:
        """Enter a scope whose leaves implicitly depend on this entity.

        Example:
            >>> with (ready & steady).as_scope():
            ...     go = Entity("Go", 1)
            >>> go.dependency_expression
            'Go (when ready & steady)'

        """
        return enter_scope(self)

    def transform[R](self, label: str, func: Callable[[T], R], *, output_type: type | None = None) -> Entity[R]:
        """Derive a new entity by applying a function to this entity's value.

        The result renders as `label(name)`.
        """
        from ._transform import transform  # noqa: PLC0415

        return transform(label, func, self, output_type=output_type)

    def split(self, splitter: Callable[[T], Sequence[Any]], *labels: str) -> tuple[Entity[Any], ...]:
        """Derive one entity per label from the items of `splitter(value)`."""
        from ._transform import split  # noqa: PLC0415

        return split(self, splitter, *labels)

    # --- Operators ---

    def _binary(self, other: object, operator: Operator) -> Entity[Any]:
        if other is None:
            msg = f"Right operand of {operator} cannot be None."
            raise ArgumentNullError(msg)
        if not isinstance(other, Entity):
            return NotImplemented
        return apply_operator(operator, self, other)

    def __add__(self, other: Entity[T]) -> Entity[T]:
        return self._binary(other, Operator.ADD)

    def __sub__(self, other: Entity[T]) -> Entity[T]:
        return self._binary(other, Operator.SUBTRACT)

    def __mul__(self, other: Entity[T]) -> Entity[T]:
        return self._binary(other, Operator.MULTIPLY)

    def __truediv__(self, other: Entity[T]) -> Entity[T]:
        return self._binary(other, Operator.DIVIDE)

    def __and__(self, other: Entity[T]) -> Entity[T]:
        return self._binary(other, Operator.AND)

    def __or__(self, other: Entity[T]) -> Entity[T]:
        return self._binary(other, Operator.OR)

    def __gt__(self, other: Entity[T]) -> Entity[bool]:
        return self._binary(other, Operator.GREATER)

    def __lt__(self, other: Entity[T]) -> Entity[bool]:
        return self._binary(other, Operator.LESS)

    def __ge__(self, other: Entity[T]) -> Entity[bool]:
        return self._binary(other, Operator.GREATER_EQUAL)

    def __le__(self, other: Entity[T]) -> Entity[bool]:
        return self._binary(other, Operator.LESS_EQUAL)

    def __eq__(self, other: object) -> Entity[bool]:  # type: ignore[override]
        if other is not None and not isinstance(other, Entity):
            return NotImplemented
        return equals(self, other)

    def __ne__(self, other: object) -> Entity[bool]:  # type: ignore[override]
        if other is not None and not isinstance(other, Entity):
            return NotImplemented
        return not_equals(self, other)

    def __hash__(self) -> int:
        return hash(self.resolve())

    def __bool__(self) -> bool:
        return bool(self.resolve())

    def __repr__(self) -> str:
        return f"Entity(name={self._name!r}, kind={self._kind.value!r})"


def apply_operator(operator: Operator, left: Entity[Any] | None, right: Entity[Any] | None) -> Entity[Any]:
    """Build the derived entity for `left <operator> right`.

    Support is decided here, at construction; the chosen implementation runs
    on every resolve.

    Raises:
        ArgumentNullError: If either operand is None.
        UnsupportedOperationError: If the operator is not supported for the operand type.

    """
    if left is None or right is None:
        side = "Left" if left is None else "Right"
        msg = f"{side} operand of {operator} cannot be None."
        raise ArgumentNullError(msg)

    if operator is Operator.EQUAL:
        return equals(left, right)
    if operator is Operator.NOT_EQUAL:
        return not_equals(left, right)

    left_type = left._value_type
    right_type = right._value_type
    if left_type is None or right_type is None:
        return _apply_deferred(operator, left, right)

    if operator in ORDERING_OPERATORS:
        predicate = resolve_ordering(operator, left_type, right_type)
        return Entity.derive(
            operator,
            (left, right),
            lambda: predicate(left.resolve(), right.resolve()),
            value_type=bool,
        )

    function = resolve_binary(operator, left_type, right_type)
    return Entity.derive(
        operator,
        (left, right),
        lambda: function(left.resolve(), right.resolve()),
        value_type=left_type,
    )


def _apply_deferred(operator: Operator, left: Entity[Any], right: Entity[Any]) -> Entity[Any]:
    """Build `left <operator> right` when an operand's type is only known once resolved.

    The implementation is chosen from the resolved values on every resolve, so
    building the graph runs no user code and unsupported types fail in `resolve()`.
    """
    is_ordering = operator in ORDERING_OPERATORS
    choose = resolve_ordering if is_ordering else resolve_binary

    def compute() -> Any:
        left_value = left.resolve()
        right_value = right.resolve()
        return choose(operator, type(left_value), type(right_value))(left_value, right_value)

    logger.debug("Deferring dispatch of %s until resolve", operator)
    return Entity.derive(
        operator,
        (left, right),
        compute,
        value_type=bool if is_ordering else left._value_type,
    )


def equals(left: Entity[Any] | None, right: Entity[Any] | None) -> Entity[bool]:
    """Traced value equality, legal for every value type.

    Missing operands short-circuit to a literal leaf: both None gives
    `Entity("true", True)`, exactly one None gives `Entity("false", False)`.
    """
    if left is None and right is None:
        return Entity("true", True)
    if left is None or right is None:
        return Entity("false", False)
    return Entity.derive(Operator.EQUAL, (left, right), lambda: left.resolve() == right.resolve(), value_type=bool)


def not_equals(left: Entity[Any] | None, right: Entity[Any] | None) -> Entity[bool]:
    """Traced value inequality; the negation of `equals`, with the same None handling."""
    if left is None and right is None:
        return Entity("false", False)
    if left is None or right is None:
        return Entity("true", True)
    return Entity.derive(Operator.NOT_EQUAL, (left, right), lambda: left.resolve() != right.resolve(), value_type=bool)
