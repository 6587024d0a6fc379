"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Final

from .errors import ValidationError


class DuplicationType(str, Enum):
    """
    Clone taxonomy, from most to least literal:

    - Type 1 (exact): identical fragments
    - Type 2 (renamed): identifiers changed
    - Type 3 (gapped): small modifications
    - Type 4 (semantic): functionally similar
    """

    EXACT_CLONE = "exact"
    RENAMED_CLONE = "renamed"
    GAPPED_CLONE = "gapped"
    SEMANTIC_CLONE = "semantic"

    @property
    def rule_id(self) -> str:
        return _RULE_IDS[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def min_similarity(self) -> float:
        return _MIN_SIMILARITY[self]

    def __str__(self) -> str:
        return self.display_name


_RULE_IDS: Final[dict[DuplicationType, str]] = {
    DuplicationType.EXACT_CLONE: "DUP001",
    DuplicationType.RENAMED_CLONE: "DUP002",
    DuplicationType.GAPPED_CLONE: "DUP003",
    DuplicationType.SEMANTIC_CLONE: "DUP004",
}

_DISPLAY_NAMES: Final[dict[DuplicationType, str]] = {
    DuplicationType.EXACT_CLONE: "Exact Clone",
    DuplicationType.RENAMED_CLONE: "Renamed Clone",
    DuplicationType.GAPPED_CLONE: "Gapped Clone",
    DuplicationType.SEMANTIC_CLONE: "Semantic Clone",
}

_MIN_SIMILARITY: Final[dict[DuplicationType, float]] = {
    DuplicationType.EXACT_CLONE: 1.0,
    DuplicationType.RENAMED_CLONE: 0.95,
    DuplicationType.GAPPED_CLONE: 0.80,
    DuplicationType.SEMANTIC_CLONE: 0.70,
}

DEFAULT_LANGUAGES: Final = ("rust", "python", "javascript", "typescript")
DEFAULT_EXCLUDE_PATTERNS: Final = (
    "**/target/**",
    "**/node_modules/**",
    "**/.git/**",
    "**/vendor/**",
)


@dataclass(frozen=True, slots=True)
class DuplicationThresholds:
    min_lines: int = 6
    # Also the fingerprint window size.
    min_tokens: int = 50
    similarity_threshold: float = 0.80
    detect_exact: bool = True
    detect_renamed: bool = True
    detect_gapped: bool = True
    detect_semantic: bool = False
    languages: tuple[str, ...] = DEFAULT_LANGUAGES
    exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    # Reserved for a gapped-clone comparator; nothing reads it yet.
    max_gap_size: int = 5

    @classmethod
    def strict(cls) -> DuplicationThresholds:
        return cls(min_lines=4, min_tokens=30, similarity_threshold=0.90)

    @classmethod
    def lenient(cls) -> DuplicationThresholds:
        return cls(min_lines=10, min_tokens=100, similarity_threshold=0.70)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, object],
        *,
        base: DuplicationThresholds | None = None,
    ) -> DuplicationThresholds:
        """
        Build thresholds from a JSON-like mapping, layered over ``base``.

        Raises ValidationError on unknown keys, wrong value types or values
        out of range.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValidationError(f"Unknown threshold keys: {', '.join(unknown)}")

        changes: dict[str, object] = {}
        for key, value in data.items():
            changes[key] = _coerce_field(key, value)

        result = replace(base if base is not None else cls(), **changes)
        result.validate()
        return result

    def validate(self) -> None:
        if self.min_tokens < 1:
            raise ValidationError(f"min_tokens must be >= 1, got {self.min_tokens}")
        if self.min_lines < 0:
            raise ValidationError(f"min_lines must be >= 0, got {self.min_lines}")
        if self.max_gap_size < 0:
            raise ValidationError(
                f"max_gap_size must be >= 0, got {self.max_gap_size}"
            )
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValidationError(
                "similarity_threshold must be within [0, 1], "
                f"got {self.similarity_threshold}"
            )

    def should_detect(self, dup_type: DuplicationType) -> bool:
        if dup_type is DuplicationType.EXACT_CLONE:
            return self.detect_exact
        if dup_type is DuplicationType.RENAMED_CLONE:
            return self.detect_renamed
        if dup_type is DuplicationType.GAPPED_CLONE:
            return self.detect_gapped
        return self.detect_semantic

    def meets_threshold(self, similarity: float, dup_type: DuplicationType) -> bool:
        return similarity >= max(self.similarity_threshold, dup_type.min_similarity)

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            out[f.name] = list(value) if isinstance(value, tuple) else value
        return out


_INT_FIELDS: Final = frozenset({"min_lines", "min_tokens", "max_gap_size"})
_BOOL_FIELDS: Final = frozenset(
    {"detect_exact", "detect_renamed", "detect_gapped", "detect_semantic"}
)
_STR_LIST_FIELDS: Final = frozenset({"languages", "exclude_patterns"})


def _coerce_field(key: str, value: object) -> object:
    if key in _INT_FIELDS:
        # bool is an int subclass; reject it explicitly.
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"Threshold '{key}' must be an integer")
        return value
    if key in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ValidationError(f"Threshold '{key}' must be a boolean")
        return value
    if key in _STR_LIST_FIELDS:
        if not isinstance(value, (list, tuple)) or not all(
            isinstance(v, str) for v in value
        ):
            raise ValidationError(f"Threshold '{key}' must be a list of strings")
        return tuple(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Threshold '{key}' must be a number")
    return float(value)
