"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .detector import CloneDetector, SimilarityFn, exact_match_similarity
from .errors import FileProcessingError
from .fingerprint import TokenFingerprinter
from .thresholds import DuplicationThresholds, DuplicationType
from .tokenizer import tokenize_source
from .violations import DuplicationViolation

UNKNOWN_LANGUAGE: Final = "unknown"

LANGUAGE_BY_EXTENSION: Final[dict[str, str]] = {
    "rs": "rust",
    "py": "python",
    "js": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "mts": "typescript",
    "cts": "typescript",
    "tsx": "typescript",
    "go": "go",
    "java": "java",
    "c": "c",
    "h": "c",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "hpp": "cpp",
    "hxx": "cpp",
    "cs": "csharp",
    "rb": "ruby",
    "php": "php",
    "swift": "swift",
    "kt": "kotlin",
    "kts": "kotlin",
}


def extension_to_language(extension: str) -> str:
    return LANGUAGE_BY_EXTENSION.get(extension, UNKNOWN_LANGUAGE)


def detect_language(path: str | Path) -> str:
    return extension_to_language(Path(path).suffix[1:])


def glob_to_regex(pattern: str) -> re.Pattern[str] | None:
    """
    Translate an exclude glob into an unanchored regex.

    This is a plain textual rewrite, not a glob engine: ``**`` becomes
    ``.*`` and then every ``*`` (including the one just produced) becomes
    ``[^/]*``. Patterns that do not compile return None.
    """
    translated = pattern.replace("**", ".*").replace("*", "[^/]*")
    try:
        return re.compile(translated)
    except re.error:
        return None


@dataclass(frozen=True, slots=True)
class DuplicationStats:
    total_clones: int = 0
    exact_clones: int = 0
    renamed_clones: int = 0
    gapped_clones: int = 0
    semantic_clones: int = 0
    total_duplicated_lines: int = 0


class DuplicationAnalyzer:
    """
    Batch entry point: file selection, tokenization, fingerprinting, clone
    verification and mapping to violations. Nothing survives between calls
    to ``analyze_files``.
    """

    __slots__ = ("_exclude_regexes", "similarity", "thresholds")

    def __init__(
        self,
        thresholds: DuplicationThresholds | None = None,
        *,
        similarity: SimilarityFn = exact_match_similarity,
    ) -> None:
        if thresholds is None:
            thresholds = DuplicationThresholds()
        self.thresholds = thresholds
        self.similarity = similarity
        self._exclude_regexes = [
            rx
            for rx in (glob_to_regex(p) for p in self.thresholds.exclude_patterns)
            if rx is not None
        ]

    def analyze_files(
        self,
        paths: Iterable[str | Path],
        *,
        on_file: Callable[[Path], None] | None = None,
    ) -> list[DuplicationViolation]:
        """
        Analyze ``paths`` as one batch.

        Files rejected by ``should_analyze_file`` are skipped. The first file
        that cannot be read as UTF-8 aborts the whole batch with
        FileProcessingError; no partial results are returned.
        ``on_file`` is called after each analyzed file.
        """
        min_tokens = self.thresholds.min_tokens
        fingerprinter = TokenFingerprinter(min_tokens)

        for raw in paths:
            path = Path(raw)
            if not self.should_analyze_file(path):
                continue

            try:
                content = path.read_text("utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise FileProcessingError(
                    f"Failed to read {path}: {e}", path=str(path)
                ) from e

            tokens = tokenize_source(content, self.detect_language(path))
            if len(tokens) >= min_tokens:
                fingerprinter.fingerprint_file(path, tokens)

            if on_file is not None:
                on_file(path)

        matches = fingerprinter.find_duplicates()
        detector = CloneDetector(self.thresholds, self.similarity)
        candidates = detector.verify_candidates(matches)
        return [DuplicationViolation.from_candidate(c) for c in candidates]

    def should_analyze_file(self, path: str | Path) -> bool:
        p = Path(path)
        if self.detect_language(p) not in self.thresholds.languages:
            return False

        path_str = p.as_posix()
        return not any(rx.search(path_str) for rx in self._exclude_regexes)

    def detect_language(self, path: str | Path) -> str:
        return detect_language(path)

    def get_stats(self, violations: Sequence[DuplicationViolation]) -> DuplicationStats:
        counts = dict.fromkeys(DuplicationType, 0)
        total_lines = 0
        for v in violations:
            counts[v.duplication_type] += 1
            total_lines += v.duplicated_lines

        return DuplicationStats(
            total_clones=len(violations),
            exact_clones=counts[DuplicationType.EXACT_CLONE],
            renamed_clones=counts[DuplicationType.RENAMED_CLONE],
            gapped_clones=counts[DuplicationType.GAPPED_CLONE],
            semantic_clones=counts[DuplicationType.SEMANTIC_CLONE],
            total_duplicated_lines=total_lines,
        )
