"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .detector import CloneCandidate
from .thresholds import DuplicationType


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self) -> str:
        return self.value


class ViolationCategory(str, Enum):
    ARCHITECTURE = "architecture"
    QUALITY = "quality"
    ORGANIZATION = "organization"
    NAMING = "naming"
    TESTING = "testing"

    def __str__(self) -> str:
        return self.value


@runtime_checkable
class Violation(Protocol):
    """Reporting contract shared by every validator's findings."""

    file: Path
    line: int
    severity: Severity

    def id(self) -> str: ...

    def message(self) -> str: ...

    def suggestion(self) -> str | None: ...

    def category(self) -> ViolationCategory: ...


_SEVERITY_BY_TYPE: Final[dict[DuplicationType, Severity]] = {
    DuplicationType.EXACT_CLONE: Severity.WARNING,
    DuplicationType.RENAMED_CLONE: Severity.WARNING,
    DuplicationType.GAPPED_CLONE: Severity.INFO,
    DuplicationType.SEMANTIC_CLONE: Severity.INFO,
}

_SUGGESTIONS: Final[dict[DuplicationType, str]] = {
    DuplicationType.EXACT_CLONE: (
        "Extract the duplicated code into a shared function or module"
    ),
    DuplicationType.RENAMED_CLONE: (
        "The code structure is identical with only renamed identifiers. "
        "Consider extracting with generics or parameters"
    ),
    DuplicationType.GAPPED_CLONE: (
        "Near-duplicate code detected. Consider refactoring into a common "
        "abstraction with small differences parameterized"
    ),
    DuplicationType.SEMANTIC_CLONE: (
        "Functionally similar code detected. Review if a common interface "
        "or trait could reduce duplication"
    ),
}


def severity_for(dup_type: DuplicationType) -> Severity:
    return _SEVERITY_BY_TYPE[dup_type]


@dataclass(frozen=True, slots=True)
class DuplicationViolation:
    file: Path
    line: int
    duplicate_file: Path
    duplicate_line: int
    duplication_type: DuplicationType
    similarity: float
    duplicated_lines: int
    severity: Severity

    @classmethod
    def from_candidate(cls, candidate: CloneCandidate) -> DuplicationViolation:
        return cls(
            file=candidate.file1,
            line=candidate.start_line1,
            duplicate_file=candidate.file2,
            duplicate_line=candidate.start_line2,
            duplication_type=candidate.clone_type,
            similarity=candidate.similarity,
            duplicated_lines=candidate.duplicated_lines,
            severity=severity_for(candidate.clone_type),
        )

    def id(self) -> str:
        return self.duplication_type.rule_id

    def message(self) -> str:
        return (
            f"{self.duplication_type.display_name} detected: "
            f"{self.duplicated_lines} lines duplicated from "
            f"{self.duplicate_file}:{self.duplicate_line}"
        )

    def suggestion(self) -> str | None:
        return _SUGGESTIONS[self.duplication_type]

    def category(self) -> ViolationCategory:
        return ViolationCategory.QUALITY

    def __str__(self) -> str:
        return (
            f"{self.duplication_type.display_name} at {self.file}:{self.line}: "
            f"{self.duplicated_lines} lines duplicated from "
            f"{self.duplicate_file}:{self.duplicate_line}"
        )
