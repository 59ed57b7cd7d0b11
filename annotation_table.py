"""
Per-node Annotations for a Single Rendering Pass

Every component that decides how a node should look records it here. The
table hands out a blank Annotation the first time a node is touched, and it
lives exactly as long as the pass that owns it.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List

from inclusion_proof import inclusion_proof
from node_addressing import NodeID, tree_height


@dataclass
class Annotation:
    """Visual facts about one node, accumulated before rendering."""
    proof: bool = False          # part of the inclusion proof
    in_path: bool = False        # on the path from the target leaf to the root
    target: bool = False         # the leaf data whose inclusion is proven
    perfect_root: bool = False   # root of a perfect subtree of the tree
    ephemeral: bool = False      # joining node or collapsed stand-in
    leaf: bool = False           # leaf data rather than a tree node
    data_ranges: List[int] = field(default_factory=list)  # ranges holding the leaf data
    ranges: List[int] = field(default_factory=list)       # ranges rooted at this node

    def copy(self, **changes):
        """Independent copy, optionally with some fields changed."""
        changes.setdefault("data_ranges", list(self.data_ranges))
        changes.setdefault("ranges", list(self.ranges))
        return replace(self, **changes)


class AnnotationTable:
    """Map of NodeID to Annotation with blank-on-first-touch lookup."""

    def __init__(self):
        self._nodes: Dict[NodeID, Annotation] = {}

    def get(self, node):
        """Return the annotation for `node`, creating a blank one if needed."""
        if node not in self._nodes:
            self._nodes[node] = Annotation()
        return self._nodes[node]

    def snapshot(self, node, **changes):
        """Copy of the current annotation for a single view, with `changes` applied."""
        return self.get(node).copy(**changes)

    def __contains__(self, node):
        return node in self._nodes

    def __len__(self):
        return len(self._nodes)

    def items(self):
        return sorted(self._nodes.items())


# --- INCLUSION PROOF MARKING ---

def mark_inclusion(table, index, size, proof_provider=inclusion_proof):
    """
    Mark the inclusion proof for leaf `index` and its path to the root.

    Proof nodes absorbed by a collapsed ephemeral node are left unmarked and
    the parent of the largest of them is marked in their place.
    Raises ProofUnavailable if the leaf is outside the tree.
    """
    nodes = proof_provider(index, size)
    begin, end = nodes.ephemeral_span()
    collapsed = nodes.collapsed()

    for i, node in enumerate(nodes.ids):
        if collapsed and begin <= i < end:
            continue
        table.get(node).proof = True
    if collapsed:
        table.get(nodes.ids[end - 1].parent()).proof = True

    height = tree_height(size)
    node = NodeID(0, index)
    while node.level < height:
        table.get(node).in_path = True
        node = node.parent()
    return nodes
