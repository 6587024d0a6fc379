"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Collection, Iterable
from pathlib import Path

from .analyzer import LANGUAGE_BY_EXTENSION
from .errors import ValidationError

DEFAULT_EXCLUDES = (
    ".git",
    ".hg",
    ".venv",
    "venv",
    "__pycache__",
    "node_modules",
    "site-packages",
    "target",
    "vendor",
    "dist",
    "build",
    ".tox",
)

SENSITIVE_DIRS = {
    "/etc",
    "/sys",
    "/proc",
    "/dev",
    "/root",
    "/boot",
    "/var",
    "/private/var",
    "/usr/bin",
    "/usr/sbin",
    "/private/etc",
}


def _get_tempdir() -> Path:
    return Path(tempfile.gettempdir()).resolve()


def _walk_candidates(
    rootp: Path, wanted: frozenset[str], excludes: frozenset[str]
) -> list[Path]:
    """
    Paths under ``rootp`` with a wanted suffix, sorted.

    Directories named in ``excludes`` are pruned before they are entered;
    ``rootp`` itself is never matched against ``excludes``.
    """
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(rootp):
        dirnames[:] = [d for d in dirnames if d not in excludes]
        base = Path(dirpath)
        found.extend(
            base / name for name in filenames if Path(name).suffix[1:] in wanted
        )
    return sorted(found)


def iter_source_files(
    root: str,
    extensions: Collection[str] = tuple(LANGUAGE_BY_EXTENSION),
    excludes: tuple[str, ...] = DEFAULT_EXCLUDES,
    *,
    max_files: int = 100_000,
) -> Iterable[str]:
    try:
        rootp = Path(root).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise ValidationError(f"Invalid root path '{root}': {e}") from e

    if not rootp.is_dir():
        raise ValidationError(f"Root must be a directory: {root}")

    root_str = str(rootp)
    temp_root = _get_tempdir()
    try:
        rootp.relative_to(temp_root)
        in_temp = True
    except ValueError:
        in_temp = False

    if not in_temp:
        if root_str in SENSITIVE_DIRS:
            raise ValidationError(f"Cannot scan sensitive directory: {root}")

        for sensitive in SENSITIVE_DIRS:
            if root_str.startswith(sensitive + "/"):
                raise ValidationError(f"Cannot scan under sensitive directory: {root}")

    wanted = frozenset(extensions)
    file_count = 0
    for p in _walk_candidates(rootp, wanted, frozenset(excludes)):
        if not p.is_file():
            continue

        # Symlinks may point outside root
        try:
            p.resolve().relative_to(rootp)
        except ValueError:
            continue

        file_count += 1
        if file_count > max_files:
            raise ValidationError(
                f"File count exceeds limit of {max_files}. "
                "Use more specific root or increase limit."
            )
        yield str(p)
