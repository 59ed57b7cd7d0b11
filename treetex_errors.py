"""
Error types raised while preparing a tree diagram.

Both are raised before anything is emitted, so a rejected run never
produces a partial document.
"""


class ConfigError(ValueError):
    """Invalid tree size, collapse threshold or range specification."""


class ProofUnavailable(ValueError):
    """Inclusion proof requested for a leaf outside the tree."""
