import pytest

from annotation_table import Annotation, AnnotationTable, mark_inclusion
from node_addressing import NodeID
from treetex_errors import ProofUnavailable


class TestAnnotationTable:
    def test_blank_on_first_touch(self):
        table = AnnotationTable()
        assert NodeID(1, 1) not in table
        assert table.get(NodeID(1, 1)) == Annotation()
        assert NodeID(1, 1) in table
        assert len(table) == 1

    def test_snapshot_is_independent(self):
        table = AnnotationTable()
        table.get(NodeID(0, 0)).ranges.append(1)
        snap = table.snapshot(NodeID(0, 0))
        snap.ranges.append(2)
        snap.proof = True
        assert table.get(NodeID(0, 0)).ranges == [1]
        assert not table.get(NodeID(0, 0)).proof

    def test_snapshot_with_changes(self):
        table = AnnotationTable()
        table.get(NodeID(0, 1)).in_path = True
        view = table.snapshot(NodeID(0, 1), leaf=True, in_path=False)
        assert view.leaf and not view.in_path
        assert table.get(NodeID(0, 1)).in_path
        assert not table.get(NodeID(0, 1)).leaf

    def test_copy_with_changes(self):
        ann = Annotation(in_path=True, data_ranges=[0])
        view = ann.copy(leaf=True, in_path=False, target=ann.in_path)
        assert view.leaf and view.target and not view.in_path
        assert view.data_ranges == [0]
        assert view.data_ranges is not ann.data_ranges


class TestMarkInclusion:
    def test_path_and_proof_in_perfect_tree(self):
        table = AnnotationTable()
        mark_inclusion(table, 3, 8)
        path = {node for node, ann in table.items() if ann.in_path}
        proof = {node for node, ann in table.items() if ann.proof}
        assert path == {NodeID(0, 3), NodeID(1, 1), NodeID(2, 0), NodeID(3, 0)}
        assert proof == {NodeID(0, 2), NodeID(1, 0), NodeID(2, 1)}

    def test_leaf_zero_can_be_targeted(self):
        table = AnnotationTable()
        mark_inclusion(table, 0, 5)
        assert table.get(NodeID(0, 0)).in_path
        assert table.get(NodeID(3, 0)).in_path

    def test_collapsed_span_marks_stand_in(self):
        table = AnnotationTable()
        mark_inclusion(table, 0, 7)
        proof = {node for node, ann in table.items() if ann.proof}
        assert proof == {NodeID(0, 1), NodeID(1, 1), NodeID(2, 1)}
        assert not table.get(NodeID(0, 6)).proof
        assert not table.get(NodeID(1, 2)).proof

    @pytest.mark.parametrize("size", [1, 2, 6, 11, 23])
    def test_path_is_exactly_the_ancestors(self, size):
        for target in range(size):
            table = AnnotationTable()
            mark_inclusion(table, target, size)
            path = {node for node, ann in table.items() if ann.in_path}
            expected = set()
            node = NodeID(0, target)
            while node.level < (size - 1).bit_length() + 1:
                expected.add(node)
                node = node.parent()
            assert path == expected

    def test_out_of_bounds_leaves_table_untouched(self):
        table = AnnotationTable()
        with pytest.raises(ProofUnavailable):
            mark_inclusion(table, 8, 8)
        assert len(table) == 0
