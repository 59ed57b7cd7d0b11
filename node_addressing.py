"""
Node Addressing for Append-Only Merkle Trees

Nodes are identified by (level, index). Level 0 holds the leaves, and the
node (level, index) covers leaves [index << level, (index + 1) << level).
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class NodeID:
    """Address of a node in a binary append-only tree."""
    level: int
    index: int

    def parent(self):
        return NodeID(self.level + 1, self.index >> 1)

    def sibling(self):
        return NodeID(self.level, self.index ^ 1)

    def left_child(self):
        """Left child of an internal node; the right one is its sibling."""
        return NodeID(self.level - 1, self.index * 2)

    def coverage(self):
        """Half-open range of leaf indices below this node."""
        return self.index << self.level, (self.index + 1) << self.level

    def __str__(self):
        return f"{self.level}.{self.index}"


def tree_height(size):
    """Number of levels in a tree of the given size, leaves included."""
    return (size - 1).bit_length() + 1
