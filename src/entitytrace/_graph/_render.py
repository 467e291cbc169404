"""ASCII rendering of graph snapshots.

Example output:

    Total = 150
    ├── Base = 100
    │     [arbitrary] source: db
    └── Tax = 50
          [value] rate: 0.5
"""

from ._node import GraphNode

_BRANCH = "├── "
_LAST_BRANCH = "└── "
_CONTINUE = "│   "
_BLANK = "    "


def _render_node(node: GraphNode, lines: list[str], prefix: str, *, is_last: bool, is_root: bool) -> None:
    connector = "" if is_root else (_LAST_BRANCH if is_last else _BRANCH)
    lines.append(f"{prefix}{connector}{node.label} = {node.value}")

    # Metadata lines and children share the same continuation prefix
    child_prefix = prefix + ("" if is_root else (_BLANK if is_last else _CONTINUE))

    if node.arbitrary_state:
        lines.extend(f"{child_prefix}  [arbitrary] {key}: {value}" for key, value in node.arbitrary_state.items())
    if node.value_state:
        lines.extend(f"{child_prefix}  [value] {key}: {value}" for key, value in node.value_state.items())

    last_index = len(node.children) - 1
    for index, child in enumerate(node.children):
        _render_node(child, lines, child_prefix, is_last=index == last_index, is_root=False)


def render_graph(node: GraphNode) -> str:
    """Render a snapshot as an indented ASCII tree.

    Each node is one `<label> = <value>` line, where the label is the
    description when set and the name otherwise. Metadata entries follow
    their node, tagged `[arbitrary]` or `[value]`. Lines are joined with
    newlines, without a trailing newline.

    Args:
        node: The root of the snapshot.

    Returns:
        The rendered tree.

    """
    lines: list[str] = []
    _render_node(node, lines, "", is_last=True, is_root=True)
    return "\n".join(lines)
