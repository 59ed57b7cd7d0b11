"""
LaTeX Forest Markup

Writes rendered blocks as a standalone LaTeX document drawn with the forest
package. Feed the output to xelatex, e.g.

    python treetex.py --tree_size 23 --inclusion 7 | xelatex
"""

from style_resolver import Border, Shape
from tree_renderer import BlockKind

# Colours referenced by node styles, as RGB triples.
COLOURS = {
    "proof": (1, 0.5, 0.5),
    "proof_ephemeral": (1, 0.7, 0.7),
    "perfect": (1, 0.9, 0.5),
    "target": (0.5, 0.5, 0.9),
    "target_path": (0.7, 0.7, 0.9),
    "mega": (0.9, 0.9, 0.9),
    "target0": (0.1, 0.9, 0.1),
    "target1": (0.1, 0.1, 0.9),
    "target2": (0.9, 0.1, 0.9),
    "range0": (0.3, 0.9, 0.3),
    "range1": (0.3, 0.3, 0.9),
    "range2": (0.9, 0.3, 0.9),
}


def colour_definitions():
    return "".join(
        f"\\definecolor{{{name}}}{{rgb}}{{{r:g},{g:g},{b:g}}}\n" for name, (r, g, b) in COLOURS.items()
    )


PREAMBLE = r"""
% Hash-tree
% Author: treetex
\documentclass[convert]{standalone}
\usepackage[dvipsnames]{xcolor}
\usepackage{forest}


\begin{document}

% Change colours here:
%COLOURS%
\forestset{
	% Edge style for collapsed perfect subtrees: instead of a line, draw a
	% triangle between the anchors of the parent and its children.
	perfect/.style={edge path={%
		\noexpand\path[fill=mega, \forestoption{edge}]
				(.parent first)--(!u.children)--(.parent last)--cycle
				\forestoption{edge label};
		}
	},
}
\begin{forest}
""".replace("%COLOURS%\n", colour_definitions() + "\n")

POSTFIX = r"""\end{forest}
\end{document}
"""

DEFAULT_EPHEMERAL_NODE_ATTR = "draw, dotted"


# --- NODE TEXT FORMATS ---

def address_text(node):
    return f"{node.level}.{node.index}"


def hash_text(node):
    # Internal nodes hash their children, leaves hash their data.
    if node.level >= 1:
        child_level = node.level - 1
        left = node.index * 2
        return (f"{{$H_{{{node.level}.{node.index}}} =$ \\\\ "
                f"$H(H_{{{child_level}.{left}}} || H_{{{child_level}.{left + 1}}})$}}")
    return f"{{$H_{{{node.level}.{node.index}}} =$ \\\\ $H(leaf_{{{node.index}}})$}}"


NODE_FORMATS = {
    "address": address_text,
    "hash": hash_text,
}


def default_data_text(node):
    return f"{{$leaf_{{{node.index}}}$}}"


def leaf_data_text(leaves):
    """Data text taken from user supplied leaf data."""
    return lambda node: leaves[node.index]


# --- STYLE ---

def forest_options(style, attr_perfect_root="", attr_ephemeral_node=DEFAULT_EPHEMERAL_NODE_ATTR):
    """Forest option list for a node style."""
    attr = []
    if style.emphasized_root and attr_perfect_root:
        attr.append(attr_perfect_root)
    for position, colour in style.fill.bands:
        attr.append(f"{position} color={colour}")
    attr.append("fill=" + style.fill.colour)

    if style.border is Border.EPHEMERAL:
        attr.append(attr_ephemeral_node)
    else:
        attr.append("draw")

    if style.shape is Shape.CIRCLE:
        attr.append("circle, minimum size=3em, align=center")
    else:
        attr.append("minimum size=1.5em, align=center, base=bottom")
    return ", ".join(attr)


class ForestSink:
    """Writes NodeBlocks as forest bracket notation to a text stream."""

    def __init__(self, stream, node_text=address_text, data_text=default_data_text,
                 attr_perfect_root="", attr_ephemeral_node=DEFAULT_EPHEMERAL_NODE_ATTR):
        self.stream = stream
        self.node_text = node_text
        self.data_text = data_text
        self.attr_perfect_root = attr_perfect_root
        self.attr_ephemeral_node = attr_ephemeral_node

    def _options(self, style):
        return forest_options(style, self.attr_perfect_root, self.attr_ephemeral_node)

    def begin(self):
        self.stream.write(PREAMBLE)

    def end(self):
        self.stream.write(POSTFIX)

    def emit(self, block):
        kind, p = block.kind, block.prefix
        if kind is BlockKind.INNER:
            line = f"{p} [{self.node_text(block.node)}, {self._options(block.style)}, tier={block.tier}\n"
        elif kind is BlockKind.LEAF:
            line = f"{p} [{self.node_text(block.node)}, {self._options(block.style)}, align=center, tier=leaf\n"
        elif kind is BlockKind.LEAF_DATA:
            line = f"{p} [{self.data_text(block.node)}, {self._options(block.style)}, align=center, tier=leafdata]\n"
        elif kind is BlockKind.MEGA:
            begin, end = block.span
            line = (f"{p} [{begin}\\dots{end}, edge label={{node[midway, above]{{{end - begin}}}}}, "
                    f"perfect, tier=leaf, minimum width={block.width:f}\\linewidth ]\n")
        elif kind is BlockKind.PLACEHOLDER:
            line = f"{p} [, no edge, tier={block.tier}\n"
        else:
            line = f"{p} ]\n"
        self.stream.write(line)
