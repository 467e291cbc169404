"""Snapshot construction for entity trees."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ._node import GraphNode

if TYPE_CHECKING:
    from entitytrace._entity import Entity

logger = logging.getLogger(__name__)


def _snapshot(entity: Entity[Any]) -> GraphNode:
    children = [_snapshot(operand) for operand in entity.operands]
    children.extend(_snapshot(condition) for condition in entity.conditions)

    return GraphNode(
        name=entity.name,
        description=entity.description,
        value=entity.resolve(),
        is_leaf=entity.is_leaf,
        operation=entity.operation,
        children=tuple(children),
        arbitrary_state=dict(entity.arbitrary_state) if entity.has_arbitrary_state else None,
        value_state=dict(entity.value_state) if entity.has_value_state else None,
    )


def build_graph(entity: Entity[Any]) -> GraphNode:
    """Build an immutable snapshot of the tree rooted at an entity.

    Each node's value is resolved once, when the node is created, and is
    never re-resolved afterwards. Domain errors raised while resolving
    propagate unchanged.

    Args:
        entity: The root entity.

    Returns:
        The root GraphNode.

    """
    root = _snapshot(entity)
    logger.debug("Built graph snapshot for %r", entity.name)
    return root
