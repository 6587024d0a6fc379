"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

from .errors import ValidationError

# Report kind -> (label used in messages, required file suffix)
REPORT_OUTPUTS: Final[dict[str, tuple[str, str]]] = {
    "json": ("JSON", ".json"),
    "text": ("text", ".txt"),
}


def resolve_root(raw: str) -> Path:
    try:
        root = Path(raw).expanduser().resolve()
    except (OSError, RuntimeError) as e:
        raise ValidationError(f"Invalid root path: {e}") from e
    if not root.exists():
        raise ValidationError(f"Root path does not exist: {root}")
    return root


def resolve_report_path(raw: str | None, *, kind: str) -> Path | None:
    """
    Resolve a ``--json``/``--text`` destination.

    Returns None when the flag was not given. A suffix that does not match
    ``REPORT_OUTPUTS[kind]`` raises ValidationError.
    """
    if not raw:
        return None
    label, suffix = REPORT_OUTPUTS[kind]
    out = Path(raw).expanduser()
    if out.suffix.lower() != suffix:
        raise ValidationError(
            f"Invalid {label} output extension: {out} (expected {suffix})."
        )
    return out.resolve()


def report_label(kind: str) -> str:
    return REPORT_OUTPUTS[kind][0]
