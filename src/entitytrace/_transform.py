"""Function-form derived entities: transforms over one or more sources and splits."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._entity import Entity, validate_label
from ._errors import ArgumentInvalidError, ArgumentNullError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def _validate_function(func: object, what: str) -> None:
    if func is None:
        msg = f"{what} cannot be None."
        raise ArgumentNullError(msg)
    if not callable(func):
        msg = f"{what} must be callable, got {type(func).__name__}."
        raise ArgumentInvalidError(msg)


def _validate_source(source: object, position: int) -> None:
    if source is None:
        msg = f"Source {position} cannot be None."
        raise ArgumentNullError(msg)
    if not isinstance(source, Entity):
        msg = f"Source {position} must be an Entity, got {type(source).__name__}."
        raise ArgumentInvalidError(msg)


def transform[R](
    label: str,
    func: Callable[..., R],
    *sources: Entity[Any],
    output_type: type | None = None,
) -> Entity[R]:
    """Derive an entity by applying a function to the resolved values of its sources.

    The result renders as `label(source1, source2, ...)` in names and
    expressions and resolves to `func(*resolved_sources)` on every call.

    Args:
        label: Function label shown in names, expressions and graphs (e.g. "Round").
        func: Function of the sources' values.
        *sources: One or more source entities, passed to `func` in order.
        output_type: The result's type for further operator dispatch. Inferred when None.

    Returns:
        The derived entity.

    Raises:
        ArgumentNullError: If func or any source is None.
        ArgumentInvalidError: If the label is blank, func is not callable, or no source is given.

    Example:
        >>> first = Entity("FirstName", "John")
        >>> last = Entity("LastName", "Doe")
        >>> full = transform("Combine", lambda f, l: f"{f} {l}", first, last)
        >>> full.dependency_expression
        'Combine(FirstName, LastName)'

    """
    if not sources:
        msg = "Transform requires at least one source."
        raise ArgumentInvalidError(msg)
    for position, source in enumerate(sources, start=1):
        _validate_source(source, position)
    _validate_function(func, "Transform function")
    validate_label(label)

    return Entity.derive(
        label,
        sources,
        lambda: func(*(source.resolve() for source in sources)),
        value_type=output_type,
    )


def split(source: Entity[Any], splitter: Callable[[Any], Sequence[Any]], *labels: str) -> tuple[Entity[Any], ...]:
    """Derive one entity per label from a single source.

    Entity `i` resolves to `splitter(source.resolve())[i]`; the splitter runs
    again on every resolve of every part.

    Args:
        source: The entity to split.
        splitter: Function returning a sequence with at least `len(labels)` items.
        *labels: One label per part, at least two.

    Returns:
        The derived entities, in label order.

    Raises:
        ArgumentNullError: If source or splitter is None.
        ArgumentInvalidError: If fewer than two labels are given, a label is blank,
            or splitter is not callable.

    """
    _validate_source(source, 1)
    _validate_function(splitter, "Splitter")
    if len(labels) < 2:
        msg = f"Split requires at least two labels, got {len(labels)}."
        raise ArgumentInvalidError(msg)
    for label in labels:
        validate_label(label)

    return tuple(
        Entity.derive(label, (source,), lambda index=index: splitter(source.resolve())[index])
        for index, label in enumerate(labels)
    )
