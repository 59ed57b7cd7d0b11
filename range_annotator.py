"""
Leaf Range Annotation

Up to three half-open leaf ranges can be highlighted. A range colours every
leaf's data inside it, and every perfect subtree root of its own compact
decomposition. The position of a range in the list picks its colour.
"""

from dataclasses import dataclass
from typing import List

from compact_range import range_nodes
from node_addressing import NodeID
from treetex_errors import ConfigError

# Maximum number of ranges to allow.
MAX_RANGES = 3


@dataclass(frozen=True)
class Range:
    """Half-open leaf range [lo, hi)."""
    lo: int
    hi: int

    def __str__(self):
        return f"{self.lo}:{self.hi}"


def validate_ranges(ranges, tree_size):
    """Raise ConfigError unless `ranges` can be drawn on a tree of this size."""
    if len(ranges) > MAX_RANGES:
        raise ConfigError(f"too many ranges {len(ranges)}, must be {MAX_RANGES} or fewer")
    for rng in ranges:
        if rng.lo < 0 or rng.hi < 0:
            raise ConfigError(f"range {rng} has a negative bound")
        if rng.hi > tree_size:
            raise ConfigError(f"range {rng} extends past end of tree ({tree_size})")
        if rng.lo > rng.hi:
            raise ConfigError(f"range elements in {rng} are out of order")


def parse_ranges(text, tree_size) -> List[Range]:
    """
    Parse comma separated ranges of the form L:R, e.g. "2:5,4:8".

    An empty string means no ranges. Raises ConfigError on malformed or
    out-of-bounds input.
    """
    if not text.strip():
        return []
    pairs = text.split(",")
    if len(pairs) > MAX_RANGES:
        raise ConfigError(f"too many ranges {len(pairs)}, must be {MAX_RANGES} or fewer")

    ranges = []
    for pair in pairs:
        lr = pair.split(":")
        if len(lr) != 2:
            raise ConfigError(f"specified range {pair!r} is invalid")
        try:
            lo, hi = int(lr[0]), int(lr[1])
        except ValueError as e:
            raise ConfigError(f"range {pair!r} is malformed: {e}") from e
        ranges.append(Range(lo, hi))

    validate_ranges(ranges, tree_size)
    return ranges


def apply_ranges(table, ranges, tree_size):
    """Record range membership of leaves and range roots in `table`."""
    validate_ranges(ranges, tree_size)

    for ri, rng in enumerate(ranges):
        for i in range(rng.lo, rng.hi):
            table.get(NodeID(0, i)).data_ranges.append(ri)

        for node in range_nodes(rng.lo, rng.hi):
            table.get(node).ranges.append(ri)
