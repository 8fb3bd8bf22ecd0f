"""Indented outline to HTML/SVG tree diagram converter."""
from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Iterator, List, Sequence, Tuple

FONT_SIZE = 14.0
CHAR_WIDTH = FONT_SIZE * 0.6  # monospace approximation
LINE_HEIGHT = FONT_SIZE * 1.2
BOX_WIDTH = 250.0
PADDING = 10.0
VERTICAL_GAP = 20.0
HORIZONTAL_GAP = 40.0
ORIGIN = (10.0, 10.0)
SVG_WIDTH = 2000

ROOT_LABEL = "Root"
MAX_INPUT_BYTES = 10_000
DEFAULT_OUTPUT = "hierarchical_notes.html"

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Hierarchical Notes Visualization</title>
    <style>
        body {{ margin: 0; padding: 0; }}
        svg {{ display: block; }}
    </style>
</head>
<body>
    {svg}
</body>
</html>
"""


@dataclass
class OutlineNode:
    """One outline entry; owns its children in document order."""

    content: str
    children: List["OutlineNode"] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def text_height(self) -> float:
        return len(self.lines) * LINE_HEIGHT + 2 * PADDING


def split_lines(text: str) -> List[str]:
    """Split outline text on ``"\\n"``.

    One trailing newline ends the last line rather than starting a blank
    one, so ``"a\\n"`` is one line; ``"a\\n\\n"`` still yields a blank second
    line. Empty text has no lines.
    """
    if not text:
        return []
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def wrap_text(text: str, max_width: float) -> List[str]:
    """Greedy word wrap with a fixed per-character width.

    Words are separated by single spaces only; runs of spaces produce empty
    words which still cost a separator. A word wider than the budget gets a
    line of its own and is never split.
    """
    limit = max_width - 2 * PADDING
    lines: List[str] = []
    current = ""
    line_width = 0.0
    for word in text.split(" "):
        word_width = len(word) * CHAR_WIDTH
        if line_width + word_width > limit and current:
            lines.append(current)
            current = ""
            line_width = 0.0
        if current:
            current += " "
            line_width += CHAR_WIDTH
        current += word
        line_width += word_width
    if current:
        lines.append(current)
    return lines


def parse_outline(lines: Sequence[str]) -> OutlineNode:
    """Build the node tree from indented lines.

    Two leading spaces make one level. A line indented past the deepest live
    ancestor is attached to that ancestor instead of being rejected.
    """
    root = OutlineNode(ROOT_LABEL)
    stack = [root]
    for line in lines:
        indent = len(line) - len(line.lstrip(" "))
        content = line[indent:].strip(" ")
        depth = indent // 2 + 1
        while len(stack) > depth:
            stack.pop()

        node = OutlineNode(content, lines=wrap_text(content, BOX_WIDTH), width=BOX_WIDTH)
        node.height = node.text_height
        stack[-1].children.append(node)
        stack.append(node)
    return root


def layout_tree(node: OutlineNode, x: float = ORIGIN[0], y: float = ORIGIN[1]) -> None:
    # Parents stay top-aligned with their first child.
    node.x = x
    node.y = y

    child_x = x + node.width + HORIZONTAL_GAP
    current_y = y
    for child in node.children:
        layout_tree(child, child_x, current_y)
        current_y += child.height + VERTICAL_GAP

    if node.children:
        node.height = max(node.height, current_y - y - VERTICAL_GAP)


def iter_nodes(root: OutlineNode) -> Iterator[Tuple[OutlineNode, int]]:
    """Yield ``(node, depth)`` in document order, the root at depth 0.

    Public helper for callers inspecting a parsed outline; depth matches the
    indentation level the node was parsed from plus one.
    """
    pending = [(root, 0)]
    while pending:
        node, depth = pending.pop()
        yield node, depth
        pending.extend((child, depth + 1) for child in reversed(node.children))


def render_svg(root: OutlineNode) -> str:
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{SVG_WIDTH}" height="{_fmt(root.height)}">',
        "  <defs>",
        "  </defs>",
    ]
    _render_node(root, parts)
    parts.append("</svg>")
    return "\n".join(parts)


def _render_node(node: OutlineNode, parts: List[str]) -> None:
    # Box text goes in verbatim, markup included.
    for child in node.children:
        parts.append(
            f'  <line x1="{_fmt(node.x + node.width / 2)}" y1="{_fmt(node.y)}" '
            f'x2="{_fmt(child.x)}" y2="{_fmt(child.y + child.height / 2)}" '
            'stroke="#999" stroke-width="2"/>'
        )
        _render_node(child, parts)

    parts.append(
        f'  <rect x="{_fmt(node.x)}" y="{_fmt(node.y)}" width="{_fmt(node.width)}" '
        f'height="{_fmt(node.height)}" rx="10" ry="10" fill="#f0f0f0" stroke="#333" '
        'stroke-width="2" filter="url(#dropShadow)"/>'
    )
    for index, line in enumerate(node.lines):
        text_y = node.y + PADDING + FONT_SIZE + index * LINE_HEIGHT
        parts.append(
            f'  <text x="{_fmt(node.x + PADDING)}" y="{_fmt(text_y)}" '
            f'font-family="Courier, monospace" font-size="{_fmt(FONT_SIZE)}" '
            f'fill="#333">{line}</text>'
        )


def render_html(svg: str) -> str:
    return HTML_TEMPLATE.format(svg=svg)


def build_document(text: str) -> str:
    """Run the whole pipeline over outline text and return the HTML page."""
    root = parse_outline(split_lines(text))
    layout_tree(root)
    return render_html(render_svg(root))


def _fmt(value: float) -> str:
    if math.isclose(value, round(value)):
        return str(int(round(value)))
    return f"{value:.3f}".rstrip("0").rstrip(".")


__all__ = [
    "OutlineNode",
    "split_lines",
    "wrap_text",
    "parse_outline",
    "layout_tree",
    "iter_nodes",
    "render_svg",
    "render_html",
    "build_document",
]
