"""Context variables for entitytrace.

The scope stack holds the condition entities that leaves constructed inside
`with condition.as_scope():` blocks implicitly depend on. It lives in a
ContextVar so that threads and asyncio tasks each see their own stack.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from ._errors import ArgumentNullError

if TYPE_CHECKING:
    from types import TracebackType

    from ._entity import Entity

logger = logging.getLogger(__name__)

# Outermost condition first. Tuples are never mutated in place, so a leaf can
# keep the tuple it captured.
_condition_stack_var: ContextVar[tuple[Entity[Any], ...]] = ContextVar("condition_stack", default=())


def get_condition_stack() -> tuple[Entity[Any], ...]:
    """Get the active scope conditions, outermost first.

    Returns an empty tuple outside of any scope.
    """
    return _condition_stack_var.get()


def scope_depth() -> int:
    """Get the number of scopes currently entered in this context."""
    return len(_condition_stack_var.get())


class ScopeHandle:
    """Handle for an entered scope.

    Releasing pops the scope's condition. Release is idempotent and also
    happens when the handle is used as a context manager and the block exits,
    including on exceptions.
    """

    def __init__(self, condition: Entity[Any]) -> None:
        self._condition = condition
        self._released = False

    @property
    def condition(self) -> Entity[Any]:
        """The condition entity pushed by this scope."""
        return self._condition

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Pop this scope's condition. A second call is a no-op."""
        if self._released:
            return
        self._released = True

        stack = _condition_stack_var.get()
        # Search from the top so re-entering the same condition pops the inner scope
        for index in range(len(stack) - 1, -1, -1):
            if stack[index] is self._condition:
                break
        else:
            logger.warning(
                "Scope for condition %r is not active in this context; nothing to release",
                self._condition.name,
            )
            return

        if index != len(stack) - 1:
            logger.warning(
                "Scope for condition %r released out of order (depth %d of %d)",
                self._condition.name,
                index + 1,
                len(stack),
            )
        _condition_stack_var.set(stack[:index] + stack[index + 1 :])
        logger.debug("Left scope %r (depth %d)", self._condition.name, len(stack) - 1)

    def __enter__(self) -> ScopeHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()


def enter_scope(condition: Entity[Any]) -> ScopeHandle:
    """Push a condition onto the scope stack.

    Every leaf constructed before the returned handle is released captures
    the condition.

    Args:
        condition: The entity the leaves implicitly depend on.

    Returns:
        A ScopeHandle; release it or use it in a `with` statement.

    Raises:
        ArgumentNullError: If condition is None.

    """
    if condition is None:
        msg = "Scope condition cannot be None."
        raise ArgumentNullError(msg)
    stack = _condition_stack_var.get()
    _condition_stack_var.set((*stack, condition))
    logger.debug("Entered scope %r (depth %d)", condition.name, len(stack) + 1)
    return ScopeHandle(condition)
