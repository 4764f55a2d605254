# -*- coding: utf-8 -*-
"""Version of the installed ``controller-docs`` distribution."""

from __future__ import annotations

from importlib import metadata

DIST_NAME = "controller-docs"

try:
    __version__ = metadata.version(DIST_NAME)
except metadata.PackageNotFoundError:
    # source checkout without `pip install -e .`
    __version__ = "0.0.0+local"
