#!/usr/bin/env python3
"""
Configuration for treetex

Collects everything that decides what a diagram shows. Defaults match the
command line defaults of treetex.py.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from forest_markup import DEFAULT_EPHEMERAL_NODE_ATTR
from tree_renderer import DEFAULT_MEGA_THRESHOLD
from treetex_errors import ConfigError


class NodeFormat(Enum):
    """Text drawn inside internal and leaf hash nodes."""
    ADDRESS = "address"   # level.index
    HASH = "hash"         # H_{level.index} = H(...)


@dataclass
class TreeTexConfig:
    """Configuration of one diagram."""
    tree_size: int = 23
    leaf_data: List[str] = field(default_factory=list)  # overrides tree_size when set
    node_format: NodeFormat = NodeFormat.ADDRESS
    inclusion: Optional[int] = None   # leaf index to show the inclusion proof for
    megamode_threshold: int = DEFAULT_MEGA_THRESHOLD
    ranges: str = ""                  # comma separated L:R ranges

    # Forest treatment of special nodes
    attr_perfect_root: str = ""
    attr_ephemeral_node: str = DEFAULT_EPHEMERAL_NODE_ATTR

    # Debugging
    verbose_logging: bool = False

    @property
    def size(self):
        """Effective tree size, taking leaf data into account."""
        if self.leaf_data:
            return len(self.leaf_data)
        return self.tree_size

    def validate(self):
        """Raise ConfigError if the configuration cannot be drawn."""
        if self.size <= 0:
            raise ConfigError(f"tree size must be positive, got {self.size}")
        if self.megamode_threshold < 1:
            raise ConfigError(f"megamode threshold must be at least 1, got {self.megamode_threshold}")
        if not isinstance(self.node_format, NodeFormat):
            raise ConfigError(f"unknown node format {self.node_format!r}")
        return self


def parse_node_format(name):
    try:
        return NodeFormat(name)
    except ValueError:
        choices = ", ".join(f.value for f in NodeFormat)
        raise ConfigError(f"unknown node format {name!r}, must be one of: {choices}") from None


def parse_leaf_data(text):
    """Split comma separated leaf data, an empty string meaning none."""
    if not text:
        return []
    return text.split(",")
