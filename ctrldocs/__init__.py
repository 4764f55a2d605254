"""Controller Docs: lighting controller documentation records and exports.

The command line lives in the top-level ``main`` module; this package only
carries the version and the ``python -m ctrldocs`` entry.
"""

from ctrldocs.version import __version__

__all__ = ["__version__"]
