"""Public API for hiernotes."""
from .hiernotes import (
    OutlineNode,
    build_document,
    iter_nodes,
    layout_tree,
    parse_outline,
    render_html,
    render_svg,
    split_lines,
    wrap_text,
)

__all__ = [
    "OutlineNode",
    "build_document",
    "iter_nodes",
    "layout_tree",
    "parse_outline",
    "render_html",
    "render_svg",
    "split_lines",
    "wrap_text",
]
