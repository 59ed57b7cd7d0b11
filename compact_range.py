"""
Compact Range Decomposition

Splits a leaf range [begin, end) into the minimal ordered list of perfect
subtrees covering it. For [0, size) these are the perfect subtree roots of
the tree, ordered left to right with strictly decreasing heights.
"""

from node_addressing import NodeID


def _trailing_zeros(value):
    return (value & -value).bit_length() - 1


def decompose(begin, end):
    """
    Split [begin, end) into the bit masks of its left and right parts.

    The left part holds the subtrees hanging off the path to leaf begin-1,
    smallest first; the right part holds those hanging off the path to leaf
    end, largest first. Each set bit is one perfect subtree of that height.
    """
    if begin == 0:
        return 0, end
    xbegin = begin - 1
    # Paths to leaves begin-1 and end diverge at this level.
    d = (xbegin ^ end).bit_length() - 1
    mask = (1 << d) - 1
    return ~xbegin & mask, end & mask


def range_size(begin, end):
    """Number of perfect subtrees in the decomposition of [begin, end)."""
    left, right = decompose(begin, end)
    return bin(left).count("1") + bin(right).count("1")


def range_nodes(begin, end):
    """Ordered perfect subtree roots partitioning [begin, end)."""
    if begin > end:
        raise ValueError(f"invalid range [{begin}, {end})")
    left, right = decompose(begin, end)
    nodes = []
    pos = begin

    # Left border, from lower to upper levels.
    while left:
        level = _trailing_zeros(left)
        nodes.append(NodeID(level, pos >> level))
        pos += 1 << level
        left ^= 1 << level

    # Right border, from upper to lower levels.
    while right:
        level = right.bit_length() - 1
        nodes.append(NodeID(level, pos >> level))
        pos += 1 << level
        right ^= 1 << level

    return nodes
