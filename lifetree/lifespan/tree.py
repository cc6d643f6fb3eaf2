"""Read-only text rendering of a component tree, for debugging."""
from typing import Any, Dict, List, Optional

from .base import Component

_ASCII = {"│": "|", "└": "`", "├": "+", "─": "-", "┬": "-"}

HIGHLIGHT_START = "\x1b[1;3m"
HIGHLIGHT_END = "\x1b[0m"


def _label(component: Component, highlight: Optional[Component]) -> str:
    label = component.name
    if component is highlight:
        label = f"{HIGHLIGHT_START}{label}{HIGHLIGHT_END}"
    if component.target is not component:
        label += f" -> {type(component.target).__name__}"
    if component.style:
        label += f" [{', '.join(component.style)}]"
    return label


def _node(label: str, nodes: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {"label": label, "nodes": nodes or []}


def _draw(node: Dict[str, Any], prefix: str, unicode: bool) -> str:
    def chr_(s: str) -> str:
        return s if unicode else _ASCII[s]

    nodes = node["nodes"]
    lines = node["label"].split("\n")
    splitter = "\n" + prefix + (chr_("│") if nodes else " ") + " "
    out = prefix + splitter.join(lines) + "\n"
    for ix, child in enumerate(nodes):
        last = ix == len(nodes) - 1
        more = bool(child["nodes"])
        child_prefix = prefix + (" " if last else chr_("│")) + " "
        out += (
            prefix
            + (chr_("└") if last else chr_("├"))
            + chr_("─")
            + (chr_("┬") if more else chr_("─"))
            + " "
            + _draw(child, child_prefix, unicode)[len(prefix) + 2:]
        )
    return out


def render_tree(
    component: Component,
    upward: bool = False,
    downward: bool = True,
    highlight: Optional[Component] = None,
    unicode: bool = True
) -> str:
    """
    Render ``component`` as an indented tree.

    Args:
        component: Node to render
        upward: Nest the node inside its chain of ancestors
        downward: List the node's subtree
        highlight: Node whose label is shown in bold italics
        unicode: Use box-drawing characters (ASCII otherwise)

    Returns:
        Multi-line string ending in a newline
    """
    def subtree(comp: Component) -> Dict[str, Any]:
        children = sorted(comp.children, key=lambda c: c.name)
        return _node(_label(comp, highlight), [subtree(c) for c in children])

    if downward:
        data = subtree(component)
    else:
        data = _node(_label(component, highlight))
    if upward and downward:
        data["label"] += " *"
    if upward:
        ancestor = component.parent
        while ancestor is not None:
            data = _node(_label(ancestor, highlight), [data])
            ancestor = ancestor.parent
    return _draw(data, "", unicode)


__all__ = ["render_tree"]
