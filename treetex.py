#!/usr/bin/env python3
"""
treetex - LaTeX drawings of append-only Merkle trees

Produces a forest document showing a tree of a given size split into its
perfect subtrees, optionally with the inclusion proof of one leaf and up to
three highlighted leaf ranges.

Usage:
    python treetex.py --tree_size 23 --inclusion 7 --ranges 2:9,12:16 | xelatex

The document goes to stdout (or --output); status lines go to stderr.
"""

import argparse
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from annotation_report import save_report
from annotation_table import AnnotationTable, mark_inclusion
from forest_markup import NODE_FORMATS, ForestSink, default_data_text, leaf_data_text
from inclusion_proof import ProofNodes
from node_addressing import NodeID
from range_annotator import Range, apply_ranges, parse_ranges
from tree_preview import draw_preview
from tree_renderer import ListSink, NodeBlock, TreeRenderer
from treetex_config import TreeTexConfig, parse_leaf_data, parse_node_format
from treetex_errors import ConfigError, ProofUnavailable


@dataclass
class DiagramResult:
    """Everything one rendering pass produced."""
    config: TreeTexConfig
    size: int
    table: AnnotationTable
    ranges: List[Range] = field(default_factory=list)
    proof: Optional[ProofNodes] = None
    roots: List[NodeID] = field(default_factory=list)
    blocks: List[NodeBlock] = field(default_factory=list)


def status(config, message):
    if config.verbose_logging:
        print(message, file=sys.stderr)


def prepare_annotations(config):
    """
    Validate the configuration and annotate the tree.

    Returns (table, ranges, proof). Raises ConfigError or ProofUnavailable
    before anything is rendered.
    """
    config.validate()
    size = config.size
    ranges = parse_ranges(config.ranges, size)
    table = AnnotationTable()

    proof = None
    if config.inclusion is not None:
        proof = mark_inclusion(table, config.inclusion, size)
        status(config, f"🔍 Inclusion proof for leaf {config.inclusion}: {len(proof.ids)} nodes, "
                       f"ephemeral span {proof.begin}:{proof.end}")

    if ranges:
        apply_ranges(table, ranges, size)
        status(config, f"🎨 Highlighting {len(ranges)} range(s): {', '.join(str(r) for r in ranges)}")

    return table, ranges, proof


def render_diagram(config):
    """Annotate and render the tree into a list of blocks."""
    table, ranges, proof = prepare_annotations(config)
    renderer = TreeRenderer(table, config.megamode_threshold)
    blocks = ListSink()
    roots = renderer.render(config.size, blocks)
    status(config, f"🌳 Rendered tree of size {config.size}: {len(roots)} perfect subtree(s), "
                   f"{len(blocks)} blocks")
    return DiagramResult(config, config.size, table, ranges, proof, roots, blocks)


def make_sink(config, stream):
    data_text = leaf_data_text(config.leaf_data) if config.leaf_data else default_data_text
    return ForestSink(
        stream,
        node_text=NODE_FORMATS[config.node_format.value],
        data_text=data_text,
        attr_perfect_root=config.attr_perfect_root,
        attr_ephemeral_node=config.attr_ephemeral_node,
    )


def emit_document(result, sink):
    sink.begin()
    for block in result.blocks:
        sink.emit(block)
    sink.end()


def write_document(config, stream):
    """
    Write the complete forest document for `config` to `stream`.

    The tree is rendered in full before the first byte is written, so an
    invalid configuration leaves the stream untouched.
    """
    result = render_diagram(config)
    emit_document(result, make_sink(config, stream))
    return result


def config_from_args(args):
    config = TreeTexConfig(
        tree_size=args.tree_size,
        leaf_data=parse_leaf_data(args.leaf_data),
        node_format=parse_node_format(args.node_format),
        inclusion=args.inclusion if args.inclusion is not None and args.inclusion >= 0 else None,
        megamode_threshold=args.megamode_threshold,
        ranges=args.ranges,
        attr_perfect_root=args.attr_perfect_root,
        attr_ephemeral_node=args.attr_ephemeral_node,
        verbose_logging=args.verbose,
    )
    if config.leaf_data:
        print(f"⚠️  Overriding tree size to {config.size} since --leaf_data was set", file=sys.stderr)
    return config


def build_parser():
    parser = argparse.ArgumentParser(description='Produce LaTeX (forest) drawings of Merkle trees')
    parser.add_argument('--tree_size', type=int, default=23,
                        help='Size of tree to produce')
    parser.add_argument('--leaf_data', default='',
                        help='Comma separated list of leaf data text (setting this overrides --tree_size)')
    parser.add_argument('--node_format', default='address',
                        help='Format for internal node text, one of: address, hash')
    parser.add_argument('--inclusion', type=int, default=-1,
                        help='Leaf index to show inclusion proof')
    parser.add_argument('--megamode_threshold', type=int, default=4,
                        help='Treat perfect trees larger than this many layers as a single entity')
    parser.add_argument('--ranges', default='',
                        help='Comma-separated Open-Closed ranges of the form L:R')
    parser.add_argument('--attr_perfect_root', default='',
                        help="Latex treatment for perfect root nodes (e.g. 'line width=3pt')")
    parser.add_argument('--attr_ephemeral_node', default='draw, dotted',
                        help='Latex treatment for ephemeral nodes')
    parser.add_argument('--output', default=None,
                        help='Write the document to this file instead of stdout')
    parser.add_argument('--preview', default=None,
                        help='Also save a PNG preview of the tree to this file')
    parser.add_argument('--json_report', default=None,
                        help='Also save a JSON report of node annotations to this file')
    parser.add_argument('--verbose', action='store_true',
                        help='Print progress to stderr')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        if args.output:
            # Render first so a bad configuration never creates the file.
            result = render_diagram(config)
            with open(args.output, 'w') as f:
                emit_document(result, make_sink(config, f))
            status(config, f"💾 Saved document: {args.output}")
        else:
            result = write_document(config, sys.stdout)
    except (ConfigError, ProofUnavailable) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    if args.json_report:
        save_report(result, args.json_report)
        status(config, f"💾 Saved annotation report: {args.json_report}")
    if args.preview:
        if config.leaf_data:
            draw_preview(result.blocks, result.size, args.preview, data_text=leaf_data_text(config.leaf_data))
        else:
            draw_preview(result.blocks, result.size, args.preview)
        status(config, f"📊 Saved preview: {args.preview}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
