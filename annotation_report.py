"""
Annotation Report

Summarises one rendering pass as JSON: the perfect subtree roots, the
inclusion proof, the ranges, and the annotation and resolved fill of every
node that was touched.
"""

import json
from collections import Counter
from dataclasses import asdict
from datetime import datetime

from style_resolver import resolve


def build_report(result):
    """Report dict for a DiagramResult."""
    nodes = {}
    for node, ann in result.table.items():
        style = resolve(ann)
        entry = asdict(ann)
        entry["fill"] = style.fill.colour
        entry["bands"] = [list(band) for band in style.fill.bands]
        nodes[str(node)] = entry

    proof = None
    if result.proof is not None:
        proof = {
            "leaf_index": result.config.inclusion,
            "nodes": [str(n) for n in result.proof.ids],
            "ephemeral_span": list(result.proof.ephemeral_span()),
            "ephemeral_node": str(result.proof.ephem) if result.proof.ephem else None,
        }

    block_counts = Counter(block.kind.value for block in result.blocks)
    return {
        "generated_at": datetime.now().isoformat(),
        "tree_size": result.size,
        "megamode_threshold": result.config.megamode_threshold,
        "perfect_roots": [str(n) for n in result.roots],
        "ranges": [str(r) for r in result.ranges],
        "inclusion_proof": proof,
        "block_counts": dict(sorted(block_counts.items())),
        "nodes": nodes,
    }


def save_report(result, path):
    report = build_report(result)
    with open(path, 'w') as f:
        json.dump(report, f, indent=2)
    return report
