"""
Node Style Resolution

Turns an Annotation into the visual attributes of a node. The fill colour
is decided by an ordered chain of override rules, later rules winning;
border and shape are decided independently of the fill.

Colour names refer to the colours defined in the document preamble.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from annotation_table import Annotation

# --- PALETTE ---

NEUTRAL = "white"
PROOF = "proof"
PROOF_EPHEMERAL = "proof_ephemeral"
TARGET = "target"
TARGET_PATH = "target_path"

# Band positions, in the order overlapping ranges are assigned to them.
BAND_POSITIONS = ("left", "right", "middle")


def leaf_data_colour(range_index):
    """Leaf data colour of a range, at half intensity."""
    return f"target{range_index}!50"


def range_colour(range_index):
    """Range root colour of a range, a different palette from leaf data."""
    return f"range{range_index}!50"


class Border(Enum):
    SOLID = "solid"
    EPHEMERAL = "ephemeral"


class Shape(Enum):
    CIRCLE = "circle"    # tree nodes
    BOX = "box"          # leaf data


@dataclass(frozen=True)
class Fill:
    """A solid colour, or a list of (position, colour) bands over a neutral base."""
    colour: str = NEUTRAL
    bands: Tuple[Tuple[str, str], ...] = ()

    @property
    def banded(self):
        return bool(self.bands)


@dataclass(frozen=True)
class VisualAttributes:
    fill: Fill = Fill()
    border: Border = Border.SOLID
    emphasized_root: bool = False
    shape: Shape = Shape.CIRCLE


# --- FILL RULES ---

def range_fill(ann, fill):
    """One range gives a solid colour, overlapping ranges give bands."""
    if ann.leaf:
        indices, colour = ann.data_ranges, leaf_data_colour
    else:
        indices, colour = ann.ranges, range_colour

    if len(indices) == 1:
        return Fill(colour(indices[0]))
    if len(indices) > 1:
        return Fill(NEUTRAL, tuple(zip(BAND_POSITIONS, (colour(i) for i in indices))))
    return fill


def proof_fill(ann, fill):
    if ann.proof:
        return Fill(PROOF_EPHEMERAL if ann.ephemeral else PROOF)
    return fill


def target_fill(ann, fill):
    if ann.target:
        return Fill(TARGET)
    return fill


def inclusion_path_fill(ann, fill):
    """
    Path colour wins over everything, except on a leaf hash whose data sits
    in a range: there the range colouring is kept. Internal nodes above it
    still take the path colour.
    """
    if ann.in_path and not ann.data_ranges:
        return Fill(TARGET_PATH)
    return fill


# Applied in order, each one may replace the fill chosen so far.
FILL_RULES = (
    ("range", range_fill),
    ("proof", proof_fill),
    ("target", target_fill),
    ("inclusion_path", inclusion_path_fill),
)


def resolve_fill(ann):
    fill = Fill()
    for _, rule in FILL_RULES:
        fill = rule(ann, fill)
    return fill


def resolve(ann=None) -> VisualAttributes:
    """Visual attributes for an annotation; None resolves to the neutral style."""
    if ann is None:
        ann = Annotation()
    return VisualAttributes(
        fill=resolve_fill(ann),
        border=Border.EPHEMERAL if ann.ephemeral else Border.SOLID,
        emphasized_root=ann.perfect_root,
        shape=Shape.BOX if ann.leaf else Shape.CIRCLE,
    )
