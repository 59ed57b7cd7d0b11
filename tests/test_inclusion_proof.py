import pytest

from inclusion_proof import inclusion_proof
from node_addressing import NodeID
from treetex_errors import ProofUnavailable


class TestInclusionProof:
    def test_perfect_tree(self):
        nodes = inclusion_proof(3, 8)
        assert nodes.ids == [NodeID(0, 2), NodeID(1, 0), NodeID(2, 1)]
        assert not nodes.collapsed()

    def test_single_right_neighbour(self):
        nodes = inclusion_proof(0, 5)
        assert nodes.ids == [NodeID(0, 1), NodeID(1, 1), NodeID(0, 4)]
        assert nodes.ephemeral_span() == (2, 3)
        assert not nodes.collapsed()

    def test_collapsed_ephemeral_span(self):
        nodes = inclusion_proof(0, 7)
        assert nodes.ids == [NodeID(0, 1), NodeID(1, 1), NodeID(0, 6), NodeID(1, 2)]
        assert nodes.ephemeral_span() == (2, 4)
        assert nodes.collapsed()
        assert nodes.ephem == NodeID(2, 1)

    def test_last_leaf(self):
        nodes = inclusion_proof(6, 7)
        assert nodes.ids == [NodeID(1, 2), NodeID(2, 0)]
        assert not nodes.collapsed()

    def test_single_leaf_tree(self):
        assert inclusion_proof(0, 1).ids == []

    @pytest.mark.parametrize("size", [1, 2, 5, 8, 13, 23])
    def test_proof_nodes_are_disjoint_from_path(self, size):
        for index in range(size):
            nodes = inclusion_proof(index, size)
            covered = set()
            for node in nodes.ids:
                lo, hi = node.coverage()
                assert not lo <= index < hi
                leaves = set(range(lo, min(hi, size)))
                assert not covered & leaves
                covered |= leaves
            assert covered | {index} == set(range(size))

    @pytest.mark.parametrize("index,size", [(5, 5), (9, 3), (-1, 4)])
    def test_out_of_bounds(self, index, size):
        with pytest.raises(ProofUnavailable):
            inclusion_proof(index, size)
