"""Immutable snapshot of an entity tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator


@dataclass(frozen=True, slots=True)
class GraphNode:
    """A node in a computation graph snapshot.

    The value is resolved once when the snapshot is taken; later leaf
    mutations do not change it. A node has no reference back to the entity
    it was built from.

    Attributes:
        name: The entity's structural name.
        description: The entity's display label, if any.
        value: The resolved value at snapshot time.
        is_leaf: True for leaf entities, False for derived ones.
        operation: Operation label of a derived entity, None for leaves.
        children: Operand snapshots in operand order, followed by scope condition snapshots.
        arbitrary_state: Copy of the entity's arbitrary state, None when empty.
        value_state: Copy of the entity's value state, None when empty.

    """

    name: str
    description: str | None
    value: Any
    is_leaf: bool
    operation: str | None = None
    children: tuple[GraphNode, ...] = ()
    arbitrary_state: dict[str, Any] | None = None
    value_state: dict[str, Any] | None = None

    @property
    def label(self) -> str:
        """The text shown for this node: its description, falling back to its name."""
        return self.description if self.description is not None else self.name

    def iter_nodes(self) -> Generator[GraphNode]:
        """Iterate over this node and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def get_child(self, name: str) -> GraphNode | None:
        """Get the first direct child with the given name.

        Returns:
            The matching child, or None if not found.

        """
        for child in self.children:
            if child.name == name:
                return child
        return None
