"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final

from .thresholds import DuplicationType

REPORT_SCHEMA_VERSION: Final = "1.0"
DEBUG_ENV_VAR: Final = "DUPSCAN_DEBUG"


class ExitCode(IntEnum):
    SUCCESS = 0
    CONTRACT_ERROR = 2
    GATING_FAILURE = 3
    INTERNAL_ERROR = 5


EXIT_CODE_DESCRIPTIONS: Final[tuple[tuple[ExitCode, str], ...]] = (
    (ExitCode.SUCCESS, "success"),
    (
        ExitCode.CONTRACT_ERROR,
        (
            "contract error (invalid thresholds or config, invalid output "
            "extensions, missing root, unreadable source files)"
        ),
    ),
    (
        ExitCode.GATING_FAILURE,
        "gating failure (clones detected, threshold exceeded)",
    ),
    (
        ExitCode.INTERNAL_ERROR,
        "internal error (unexpected exception)",
    ),
)


def cli_help_epilog() -> str:
    lines = ["Exit codes"]
    lines.extend(
        f"  - {int(code)} - {description}"
        for code, description in EXIT_CODE_DESCRIPTIONS
    )
    lines.extend(
        [
            "",
            "Rule ids: "
            + ", ".join(f"{t.rule_id} {t.value}" for t in DuplicationType)
            + ".",
            f"Set {DEBUG_ENV_VAR}=1 to print tracebacks on internal errors.",
        ]
    )
    return "\n".join(lines)
