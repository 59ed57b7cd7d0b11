"""
Inclusion Proof Node Addresses

Computes which node addresses make up the inclusion proof of a leaf in an
append-only tree. Only addresses are produced; nothing is hashed.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from compact_range import range_nodes
from node_addressing import NodeID
from treetex_errors import ProofUnavailable


@dataclass
class ProofNodes:
    """
    Ordered proof node addresses, from the leaf level up to the root.

    ids[begin:end] are the nodes that together make up the ephemeral node
    `ephem`, a subtree that is not yet complete in a tree of this size. The
    span is empty (begin == end) when no such node takes part in the proof.
    """
    ids: List[NodeID] = field(default_factory=list)
    begin: int = 0
    end: int = 0
    ephem: Optional[NodeID] = None

    def ephemeral_span(self):
        return self.begin, self.end

    def collapsed(self):
        """True when more than one proof node is absorbed by the ephemeral node."""
        return self.end - self.begin > 1


def _proof_nodes(index, level, size):
    # The fork is where the path to (level, index) diverges from the path to
    # (0, size). Its sibling is the ephemeral node.
    inner = (index ^ (size >> level)).bit_length() - 1
    fork = NodeID(level + inner, index >> inner)
    begin, end = fork.coverage()

    node = NodeID(level, index)
    ids = [node]
    for _ in range(inner):
        ids.append(node.sibling())
        node = node.parent()

    len1 = len(ids)
    # Nodes to the right of the fork, smallest first.
    ids.extend(reversed(range_nodes(end, size)))
    len2 = len(ids)
    # Nodes to the left of the fork, smallest first.
    ids.extend(reversed(range_nodes(0, begin)))

    return ProofNodes(ids=ids, begin=len1, end=len2, ephem=fork.sibling())


def inclusion_proof(index, size):
    """Return the ProofNodes of the inclusion proof for leaf `index`."""
    if index < 0 or index >= size:
        raise ProofUnavailable(f"index {index} out of bounds for tree size {size}")

    nodes = _proof_nodes(index, 0, size)
    # The first entry is the leaf itself, which is not part of the proof.
    nodes.ids = nodes.ids[1:]
    if nodes.begin < nodes.end:
        nodes.begin -= 1
        nodes.end -= 1
    return nodes
