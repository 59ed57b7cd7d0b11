"""
Tree Renderer

Walks the perfect subtree decomposition of a tree and emits one NodeBlock
per visual unit to a sink. The sink sees blocks in depth-first, left to
right order; nesting is expressed only by that order and by CLOSE blocks,
so sinks must keep the order exactly.

The unbalanced top of the tree is rebuilt from ephemeral joining nodes, one
per pair of adjacent perfect subtrees. Perfect subtrees taller than the
collapse threshold are drawn as a single block.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from compact_range import range_nodes
from node_addressing import NodeID
from style_resolver import VisualAttributes, resolve
from treetex_errors import ConfigError

DEFAULT_MEGA_THRESHOLD = 4


class BlockKind(Enum):
    INNER = "inner"              # internal node, opens a nesting level
    LEAF = "leaf"                # leaf hash node, opens a nesting level
    LEAF_DATA = "leaf_data"      # leaf data, self-contained
    MEGA = "mega"                # collapsed perfect subtree, self-contained
    PLACEHOLDER = "placeholder"  # invisible tier filler, opens a nesting level
    CLOSE = "close"

    @property
    def opens(self):
        return self in (BlockKind.INNER, BlockKind.LEAF, BlockKind.PLACEHOLDER)


@dataclass(frozen=True)
class NodeBlock:
    """One emitted unit of the diagram."""
    kind: BlockKind
    prefix: str = ""
    node: Optional[NodeID] = None
    style: Optional[VisualAttributes] = None
    tier: str = ""
    span: Optional[Tuple[int, int]] = None   # MEGA only: covered leaves
    width: float = 0.0                       # MEGA only: share of the tree width


class ListSink(list):
    """Sink that just keeps the blocks, in order."""

    def emit(self, block):
        self.append(block)


class RenderContext:
    """Pending closes of one descent, kept as a stack."""

    def __init__(self, sink):
        self.sink = sink
        self._pending = []

    @property
    def depth(self):
        return len(self._pending)

    def emit(self, block):
        self.sink.emit(block)

    def open(self, block):
        self.sink.emit(block)
        self._pending.append(NodeBlock(BlockKind.CLOSE, prefix=block.prefix, node=block.node))

    def close(self):
        self.sink.emit(self._pending.pop())

    def close_to(self, depth):
        while len(self._pending) > depth:
            self.close()


class TreeRenderer:
    """Renders the tree described by an AnnotationTable."""

    def __init__(self, table, mega_threshold=DEFAULT_MEGA_THRESHOLD, decomposition=range_nodes):
        if mega_threshold < 1:
            raise ConfigError(f"collapse threshold must be at least 1, got {mega_threshold}")
        self.table = table
        self.mega_threshold = mega_threshold
        self.decomposition = decomposition
        self.size = 0

    def render(self, size, sink):
        """Emit the whole tree of `size` leaves to `sink`."""
        if size <= 0:
            raise ConfigError("tree size must be positive")
        self.size = size
        ctx = RenderContext(sink)

        roots = self.decomposition(0, size)
        prefix = ""
        for i, root in enumerate(roots):
            if i + 1 < len(roots):
                joiner = root.parent()
                self.table.get(joiner).ephemeral = True
                self._open_inner(ctx, prefix, joiner)
            prefix += " "
            self._perfect(ctx, prefix, root, top=True)
        ctx.close_to(0)
        return roots

    def _open_inner(self, ctx, prefix, node):
        style = resolve(self.table.get(node))
        ctx.open(NodeBlock(BlockKind.INNER, prefix, node, style, tier=str(node.level)))

    def _perfect(self, ctx, prefix, node, top=False):
        self.table.get(node).perfect_root = top

        if node.level == 0:
            self._leaf(ctx, prefix, node)
            return

        depth = ctx.depth
        self._open_inner(ctx, prefix, node)
        if node.level > self.mega_threshold:
            self._mega(ctx, prefix, node)
        else:
            left = node.left_child()
            self._perfect(ctx, prefix + " ", left)
            self._perfect(ctx, prefix + " ", left.sibling())
        ctx.close_to(depth)

    def _leaf(self, ctx, prefix, node):
        ann = self.table.get(node)
        ctx.open(NodeBlock(BlockKind.LEAF, prefix, node, resolve(ann), tier="leaf"))

        # Proofs carry the leaf hash, never the leaf data. The data of the
        # target leaf is drawn as the target itself.
        data = self.table.snapshot(node, leaf=True, proof=False, in_path=False, target=ann.in_path)
        ctx.emit(NodeBlock(BlockKind.LEAF_DATA, "  " + prefix, node, resolve(data), tier="leafdata"))
        ctx.close()

    def _mega(self, ctx, prefix, node):
        begin, end = node.coverage()
        ctx.emit(NodeBlock(BlockKind.MEGA, prefix, node, tier="leaf",
                           span=(begin, end), width=(end - begin) / self.size))

        # Hidden nodes keep the tiers between the root and the leaves occupied.
        depth = ctx.depth
        for tier in range(node.level - 1, 0, -1):
            ctx.open(NodeBlock(BlockKind.PLACEHOLDER, prefix, tier=str(tier)))
        ctx.close_to(depth)
