"""Graph module providing computation graph snapshots.

This module contains:
- GraphNode: An immutable snapshot of one entity and its subtree
- build_graph: Snapshot construction from an entity tree
- render_graph: ASCII tree rendering of a snapshot
"""

from ._builder import build_graph
from ._node import GraphNode
from ._render import render_graph

__all__ = ["GraphNode", "build_graph", "render_graph"]
