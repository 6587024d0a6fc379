"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import asdict
from typing import Any

from .analyzer import DuplicationStats
from .violations import DuplicationViolation


def _violation_sort_key(v: DuplicationViolation) -> tuple[str, int, str, int]:
    return (str(v.file), v.line, str(v.duplicate_file), v.duplicate_line)


def sorted_violations(
    violations: Sequence[DuplicationViolation],
) -> list[DuplicationViolation]:
    return sorted(violations, key=_violation_sort_key)


def violation_to_dict(v: DuplicationViolation) -> dict[str, Any]:
    return {
        "id": v.id(),
        "type": v.duplication_type.display_name,
        "severity": v.severity.value,
        "category": v.category().value,
        "file": str(v.file),
        "line": v.line,
        "duplicate_file": str(v.duplicate_file),
        "duplicate_line": v.duplicate_line,
        "similarity": v.similarity,
        "duplicated_lines": v.duplicated_lines,
        "message": v.message(),
        "suggestion": v.suggestion(),
    }


def to_json_report(
    violations: Sequence[DuplicationViolation],
    stats: DuplicationStats,
    meta: Mapping[str, Any] | None = None,
) -> str:
    return json.dumps(
        {
            "meta": dict(meta or {}),
            "stats": asdict(stats),
            "violations": [violation_to_dict(v) for v in sorted_violations(violations)],
        },
        ensure_ascii=False,
        indent=2,
    )


def _format_meta_line(key: str, value: object) -> str:
    if isinstance(value, Mapping):
        inner = ", ".join(f"{k}={v}" for k, v in value.items())
        return f"{key}: {inner}"
    return f"{key}: {value}"


def to_text_report(
    violations: Sequence[DuplicationViolation],
    stats: DuplicationStats,
    meta: Mapping[str, Any] | None = None,
) -> str:
    lines: list[str] = []
    if meta:
        lines.append("REPORT METADATA")
        lines.extend(_format_meta_line(k, v) for k, v in meta.items())
        lines.append("")

    lines.append(f"=== Duplications (count={len(violations)}) ===")
    for v in sorted_violations(violations):
        lines.append(f"[{v.id()}] {v.severity.value} {v}")

    lines.append("")
    lines.append("=== Statistics ===")
    lines.extend(f"{k}: {value}" for k, value in asdict(stats).items())
    return "\n".join(lines) + "\n"
