"""
Tree Preview Chart

Draws the emitted blocks with matplotlib, as a quick look at a diagram
without a LaTeX toolchain. Layout follows the same tiers as the forest
output: numbered tiers for internal nodes, then the leaf and leafdata rows.
"""

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Circle, Polygon, Rectangle, Wedge

from forest_markup import COLOURS, address_text
from style_resolver import Border, Shape
from tree_renderer import BlockKind, ListSink

LEAF_ROW = 0
DATA_ROW = -1


def to_rgb(colour):
    """RGB triple for a colour name such as "white", "proof" or "range1!50"."""
    name, _, percent = colour.partition("!")
    base = np.array((1.0, 1.0, 1.0) if name == "white" else COLOURS[name], dtype=float)
    if percent:
        # xcolor "name!P" is P% of the colour mixed with white.
        share = float(percent) / 100.0
        base = base * share + (1.0 - share)
    return tuple(base)


class PreviewNode:
    def __init__(self, block, parent=None):
        self.block = block
        self.parent = parent
        self.children = []
        self.x = 0.0
        self.y = 0.0


class PreviewSink(ListSink):
    """Keeps the blocks and rebuilds their nesting for drawing."""

    def build(self):
        root = PreviewNode(None)
        stack = [root]
        for block in self:
            if block.kind is BlockKind.CLOSE:
                stack.pop()
                continue
            node = PreviewNode(block, stack[-1])
            stack[-1].children.append(node)
            if block.kind.opens:
                stack.append(node)
        return root


def _row(tier):
    if tier == "leaf":
        return LEAF_ROW
    if tier == "leafdata":
        return DATA_ROW
    return int(tier)


def layout(root):
    """Assign x positions bottom-up, leaves one unit apart."""
    def place(node):
        for child in node.children:
            place(child)
        block = node.block
        if block is None:
            return
        node.y = _row(block.tier)
        if block.kind is BlockKind.LEAF_DATA:
            node.x = float(block.node.index)
        elif block.kind is BlockKind.MEGA:
            begin, end = block.span
            node.x = (begin + end - 1) / 2.0
        else:
            xs = [c.x for c in node.children if c.block.kind is not BlockKind.PLACEHOLDER]
            node.x = float(np.mean(xs)) if xs else 0.0

    place(root)
    return root


def _draw_fill(ax, style, x, y, radius):
    fill = style.fill
    dashed = style.border is Border.EPHEMERAL
    linestyle = ":" if dashed else "-"
    linewidth = 2.5 if style.emphasized_root else 1.0

    if style.shape is Shape.CIRCLE:
        if fill.banded:
            step = 360.0 / len(fill.bands)
            for i, (_, colour) in enumerate(fill.bands):
                ax.add_patch(Wedge((x, y), radius, 90 + i * step, 90 + (i + 1) * step,
                                   facecolor=to_rgb(colour), edgecolor="none"))
            ax.add_patch(Circle((x, y), radius, facecolor="none", edgecolor="black",
                                linestyle=linestyle, linewidth=linewidth))
        else:
            ax.add_patch(Circle((x, y), radius, facecolor=to_rgb(fill.colour), edgecolor="black",
                                linestyle=linestyle, linewidth=linewidth))
    else:
        colours = [c for _, c in fill.bands] or [fill.colour]
        width = 2 * radius / len(colours)
        for i, colour in enumerate(colours):
            ax.add_patch(Rectangle((x - radius + i * width, y - radius), width, 2 * radius,
                                   facecolor=to_rgb(colour), edgecolor="none"))
        ax.add_patch(Rectangle((x - radius, y - radius), 2 * radius, 2 * radius, facecolor="none",
                               edgecolor="black", linestyle=linestyle, linewidth=linewidth))


def plain_data_text(node):
    return f"leaf {node.index}"


def draw_preview(blocks, tree_size, output_path, node_text=address_text, data_text=plain_data_text):
    """Save a PNG preview of `blocks` to `output_path`."""
    sink = PreviewSink(blocks)
    root = layout(sink.build())
    radius = 0.3

    fig, ax = plt.subplots(figsize=(max(6, tree_size * 0.6), 6))

    def draw(node):
        block = node.block
        for child in node.children:
            if block is not None and child.block.kind not in (BlockKind.PLACEHOLDER, BlockKind.MEGA):
                ax.plot([node.x, child.x], [node.y, child.y], color="black", linewidth=0.8, zorder=0)
            draw(child)
        if block is None or block.kind is BlockKind.PLACEHOLDER:
            return
        if block.kind is BlockKind.MEGA:
            begin, end = block.span
            parent = node.parent
            ax.add_patch(Polygon([(parent.x, parent.y), (begin, node.y), (end - 1, node.y)],
                                 closed=True, facecolor=to_rgb("mega"), edgecolor="black"))
            ax.text(node.x, node.y - 0.4, f"{begin}…{end} ({end - begin})", ha="center", fontsize=8)
            return
        _draw_fill(ax, block.style, node.x, node.y, radius)
        label = data_text(block.node) if block.kind is BlockKind.LEAF_DATA else node_text(block.node)
        ax.text(node.x, node.y, label, ha="center", va="center", fontsize=7)

    draw(root)
    ax.set_aspect("equal")
    ax.autoscale_view()
    ax.axis("off")
    plt.tight_layout()
    plt.savefig(output_path, dpi=300, bbox_inches='tight')
    plt.close()
    return output_path
