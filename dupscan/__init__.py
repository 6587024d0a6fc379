"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dupscan")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = ["__version__"]
