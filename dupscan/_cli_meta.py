"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TypedDict

from .contracts import REPORT_SCHEMA_VERSION
from .thresholds import DuplicationThresholds


def _current_python_version() -> str:
    return f"{sys.version_info.major}.{sys.version_info.minor}"


class ReportMeta(TypedDict):
    """
    Canonical report metadata contract shared by JSON and TXT reports.

    Key semantics:
    - python_version: runtime major.minor string (e.g. "3.13")
    - files_found: source files discovered under root
    - files_analyzed: files that passed language and exclude-pattern selection
    - thresholds: the effective detection policy for the run
    """

    report_schema_version: str
    dupscan_version: str
    python_version: str
    root: str
    files_found: int
    files_analyzed: int
    thresholds: dict[str, object]


def _build_report_meta(
    *,
    dupscan_version: str,
    root: Path,
    files_found: int,
    files_analyzed: int,
    thresholds: DuplicationThresholds,
) -> ReportMeta:
    return {
        "report_schema_version": REPORT_SCHEMA_VERSION,
        "dupscan_version": dupscan_version,
        "python_version": _current_python_version(),
        "root": str(root),
        "files_found": files_found,
        "files_analyzed": files_analyzed,
        "thresholds": thresholds.to_dict(),
    }
