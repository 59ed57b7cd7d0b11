import io
import json

import pytest

from forest_markup import POSTFIX, PREAMBLE
from node_addressing import NodeID
from treetex import main, prepare_annotations, render_diagram, write_document
from treetex_config import NodeFormat, TreeTexConfig, parse_leaf_data, parse_node_format
from treetex_errors import ConfigError, ProofUnavailable


class TestConfig:
    def test_defaults(self):
        config = TreeTexConfig()
        assert config.size == 23
        assert config.megamode_threshold == 4
        assert config.node_format is NodeFormat.ADDRESS
        assert config.attr_ephemeral_node == "draw, dotted"

    def test_leaf_data_overrides_size(self):
        config = TreeTexConfig(tree_size=23, leaf_data=parse_leaf_data("a,b,c"))
        assert config.size == 3

    @pytest.mark.parametrize("changes", [{"tree_size": 0}, {"megamode_threshold": 0}])
    def test_invalid(self, changes):
        with pytest.raises(ConfigError):
            TreeTexConfig(**changes).validate()

    def test_node_format(self):
        assert parse_node_format("hash") is NodeFormat.HASH
        with pytest.raises(ConfigError, match="unknown node format"):
            parse_node_format("json")


class TestPipeline:
    def test_prepare_annotations(self):
        table, ranges, proof = prepare_annotations(TreeTexConfig(tree_size=8, inclusion=3, ranges="0:2"))
        assert [str(r) for r in ranges] == ["0:2"]
        assert proof.ids[0] == NodeID(0, 2)
        assert table.get(NodeID(0, 0)).data_ranges == [0]

    def test_render_diagram(self):
        result = render_diagram(TreeTexConfig(tree_size=5))
        assert result.roots == [NodeID(2, 0), NodeID(0, 4)]
        assert result.proof is None

    def test_document(self):
        out = io.StringIO()
        write_document(TreeTexConfig(tree_size=5, inclusion=2, ranges="1:3,2:5"), out)
        text = out.getvalue()
        assert text.startswith(PREAMBLE)
        assert text.endswith(POSTFIX)
        assert "fill=target_path" in text

    @pytest.mark.parametrize("config,error", [
        (TreeTexConfig(tree_size=5, ranges="0:9"), ConfigError),
        (TreeTexConfig(tree_size=5, ranges="0:1,1:2,2:3,3:4"), ConfigError),
        (TreeTexConfig(tree_size=0), ConfigError),
        (TreeTexConfig(tree_size=5, megamode_threshold=0), ConfigError),
        (TreeTexConfig(tree_size=5, inclusion=5), ProofUnavailable),
    ])
    def test_rejected_configs_write_nothing(self, config, error):
        out = io.StringIO()
        with pytest.raises(error):
            write_document(config, out)
        assert out.getvalue() == ""


class TestMain:
    def test_stdout(self, capsys):
        assert main(["--tree_size", "6", "--inclusion", "0"]) == 0
        out = capsys.readouterr().out
        assert out.startswith(PREAMBLE)
        assert "{$leaf_{5}$}" in out

    def test_leaf_data(self, capsys):
        assert main(["--leaf_data", "alpha,beta,gamma"]) == 0
        captured = capsys.readouterr()
        assert "[gamma," in captured.out
        assert "Overriding tree size to 3" in captured.err

    def test_error_exit(self, capsys):
        assert main(["--tree_size", "4", "--ranges", "3:1"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "out of order" in captured.err

    def test_bad_node_format(self, capsys):
        assert main(["--node_format", "json"]) == 1
        assert capsys.readouterr().out == ""

    def test_output_and_reports(self, tmp_path, capsys):
        doc = tmp_path / "tree.tex"
        report = tmp_path / "tree.json"
        preview = tmp_path / "tree.png"
        code = main(["--tree_size", "11", "--inclusion", "4", "--ranges", "2:6", "--verbose",
                     "--output", str(doc), "--json_report", str(report), "--preview", str(preview)])
        assert code == 0
        assert doc.read_text().endswith(POSTFIX)
        assert preview.stat().st_size > 0

        data = json.loads(report.read_text())
        assert data["tree_size"] == 11
        assert data["perfect_roots"] == ["3.0", "1.4", "0.10"]
        assert data["inclusion_proof"]["leaf_index"] == 4
        assert data["nodes"]["0.4"]["in_path"] is True
        assert data["nodes"]["0.3"]["data_ranges"] == [0]

        err = capsys.readouterr().err
        assert "Saved document" in err

    def test_output_not_created_on_error(self, tmp_path):
        doc = tmp_path / "tree.tex"
        assert main(["--tree_size", "4", "--inclusion", "9", "--output", str(doc)]) == 1
        assert not doc.exists()

    def test_preview_uses_leaf_data(self, tmp_path, monkeypatch):
        calls = []
        monkeypatch.setattr("treetex.draw_preview", lambda *args, **kwargs: calls.append(kwargs))
        preview = tmp_path / "tree.png"
        assert main(["--leaf_data", "alpha,beta", "--preview", str(preview)]) == 0
        data_text = calls[0]["data_text"]
        assert data_text(NodeID(0, 1)) == "beta"
