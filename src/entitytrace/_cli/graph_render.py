"""Rich rendering utilities for the show and tree commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic_core import to_json
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console

    from entitytrace._entity import Entity
    from entitytrace._graph import GraphNode


def render_entity_table(entity: Entity[Any], console: Console) -> None:
    """Render the summary of an entity as a Rich table.

    Args:
        entity: The entity to summarise. It is resolved once.
        console: Rich Console to output to.

    """
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Name", escape(entity.name))
    table.add_row("Kind", entity.kind.upper())
    table.add_row("Value", escape(str(entity.resolve())))
    table.add_row("Expression", escape(entity.dependency_expression))
    table.add_row("Dependencies", escape(", ".join(entity.dependency_names())) or "[dim]None[/dim]")

    console.print(table)


def render_rich_tree(node: GraphNode, console: Console) -> None:
    """Render a graph snapshot using Rich Tree.

    Args:
        node: Root of the snapshot to render.
        console: Rich Console to output to.

    """
    rich_tree = Tree(f"[bold]{escape(node.label)}[/bold] = {escape(str(node.value))}")
    _add_metadata(rich_tree, node)
    _add_tree_children(rich_tree, node.children)
    console.print(rich_tree)


def _add_tree_children(parent: Tree, children: tuple[GraphNode, ...]) -> None:
    for child in children:
        style = "blue" if child.is_leaf else "green"
        child_tree = parent.add(f"[{style}]{escape(child.label)}[/{style}] = {escape(str(child.value))}")
        _add_metadata(child_tree, child)
        _add_tree_children(child_tree, child.children)


def _add_metadata(tree: Tree, node: GraphNode) -> None:
    _add_state(tree, "arbitrary", node.arbitrary_state)
    _add_state(tree, "value", node.value_state)


def _add_state(tree: Tree, tag: str, state: Mapping[str, Any] | None) -> None:
    if not state:
        return
    for key, value in state.items():
        tree.add(f"[dim]{escape(f'[{tag}]')} {escape(str(key))}: {escape(str(value))}[/dim]")


def graph_to_json(node: GraphNode) -> str:
    """Serialise a graph snapshot to indented JSON.

    Values JSON cannot express natively are written with `str`.
    """
    return to_json(node, indent=2, fallback=str).decode()
