"""Traceable, lazily-recomputed expression graphs."""

__all__ = [
    "Addable",
    "ArgumentInvalidError",
    "ArgumentNullError",
    "Arithmetic",
    "Dividable",
    "Entity",
    "EntityKind",
    "EntityTraceError",
    "GraphNode",
    "InvalidStateError",
    "Logical",
    "Multiplicable",
    "NativeKind",
    "Operator",
    "Orderable",
    "ScopeHandle",
    "Subtractable",
    "UnsupportedOperationError",
    "build_graph",
    "enter_scope",
    "equals",
    "get_condition_stack",
    "not_equals",
    "render_graph",
    "split",
    "transform",
]

from ._capabilities import Addable, Arithmetic, Dividable, Logical, Multiplicable, Orderable, Subtractable
from ._context import ScopeHandle, enter_scope, get_condition_stack
from ._entity import Entity, equals, not_equals
from ._errors import (
    ArgumentInvalidError,
    ArgumentNullError,
    EntityTraceError,
    InvalidStateError,
    UnsupportedOperationError,
)
from ._graph import GraphNode, build_graph, render_graph
from ._operators import EntityKind, NativeKind, Operator
from ._transform import split, transform
