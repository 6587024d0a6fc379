"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, Final

from .errors import ValidationError
from .thresholds import DuplicationThresholds

MAX_CONFIG_SIZE_BYTES: Final = 1024 * 1024

PRESETS: Final[dict[str, Callable[[], DuplicationThresholds]]] = {
    "default": DuplicationThresholds,
    "strict": DuplicationThresholds.strict,
    "lenient": DuplicationThresholds.lenient,
}


def preset_thresholds(name: str) -> DuplicationThresholds:
    factory = PRESETS.get(name)
    if factory is None:
        raise ValidationError(
            f"Unknown preset '{name}' (expected one of: {', '.join(PRESETS)})"
        )
    return factory()


def _load_json_object(path: Path) -> dict[str, Any]:
    try:
        size = path.stat().st_size
    except OSError as e:
        raise ValidationError(f"Cannot stat config file at {path}: {e}") from e
    if size > MAX_CONFIG_SIZE_BYTES:
        raise ValidationError(
            f"Config file at {path} is too large: {size} bytes "
            f"(max {MAX_CONFIG_SIZE_BYTES})"
        )
    try:
        raw = path.read_text("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(f"Cannot read config file at {path}: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Corrupted config file at {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"Config payload must be an object at {path}")
    return data


def load_thresholds(
    path: str | Path, *, preset: str | None = None
) -> DuplicationThresholds:
    """
    Load thresholds from a JSON config file.

    The object may name a ``"preset"``; every other key overrides a
    threshold of that preset. An explicit ``preset`` argument wins over the
    one in the file.
    """
    config_path = Path(path)
    data = _load_json_object(config_path)

    file_preset = data.pop("preset", "default")
    if not isinstance(file_preset, str):
        raise ValidationError(f"Config 'preset' must be a string at {config_path}")

    base = preset_thresholds(preset if preset is not None else file_preset)
    try:
        return DuplicationThresholds.from_mapping(data, base=base)
    except ValidationError as e:
        raise ValidationError(f"Invalid config file at {config_path}: {e}") from e
