"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import cmp_to_key
from pathlib import Path

from .fingerprint import FingerprintMatch, lines_overlap
from .thresholds import DuplicationThresholds, DuplicationType

SimilarityFn = Callable[[FingerprintMatch], float]


@dataclass(frozen=True, slots=True)
class CloneCandidate:
    file1: Path
    start_line1: int
    end_line1: int
    file2: Path
    start_line2: int
    end_line2: int
    similarity: float
    clone_type: DuplicationType
    duplicated_lines: int


def exact_match_similarity(match: FingerprintMatch) -> float:
    """
    Default similarity: a shared window fingerprint is taken as an exact
    token-sequence match. Structural comparison plugs in here.
    """
    return 1.0


def classify_clone_type(similarity: float) -> DuplicationType:
    if similarity >= 1.0:
        return DuplicationType.EXACT_CLONE
    if similarity >= 0.95:
        return DuplicationType.RENAMED_CLONE
    if similarity >= 0.80:
        return DuplicationType.GAPPED_CLONE
    return DuplicationType.SEMANTIC_CLONE


def _compare_similarity_desc(a: CloneCandidate, b: CloneCandidate) -> int:
    # Equal or unordered (NaN) similarities tie; sorted() keeps them in input
    # order.
    if a.similarity > b.similarity:
        return -1
    if a.similarity < b.similarity:
        return 1
    return 0


def candidates_overlap(a: CloneCandidate, b: CloneCandidate) -> bool:
    """True when any endpoint of ``a`` shares lines with any endpoint of ``b``."""
    a_spans = (
        (a.file1, a.start_line1, a.end_line1),
        (a.file2, a.start_line2, a.end_line2),
    )
    b_spans = (
        (b.file1, b.start_line1, b.end_line1),
        (b.file2, b.start_line2, b.end_line2),
    )
    return any(
        fa == fb and lines_overlap(sa, ea, sb, eb)
        for fa, sa, ea in a_spans
        for fb, sb, eb in b_spans
    )


class CloneDetector:
    """
    Second stage of the pipeline: turns raw fingerprint matches into typed,
    threshold-filtered, non-overlapping clone candidates.
    """

    __slots__ = ("similarity", "thresholds")

    def __init__(
        self,
        thresholds: DuplicationThresholds,
        similarity: SimilarityFn = exact_match_similarity,
    ) -> None:
        self.thresholds = thresholds
        self.similarity = similarity

    def verify_candidates(
        self, matches: Iterable[FingerprintMatch]
    ) -> list[CloneCandidate]:
        candidates: list[CloneCandidate] = []
        for m in matches:
            candidate = self.verify_single_match(m)
            if candidate is not None and self.passes_thresholds(candidate):
                candidates.append(candidate)
        return self.deduplicate_candidates(candidates)

    def verify_single_match(self, m: FingerprintMatch) -> CloneCandidate | None:
        duplicated_lines = min(m.location1.line_count, m.location2.line_count)
        similarity = self.similarity(m)
        clone_type = classify_clone_type(similarity)
        if not self.thresholds.should_detect(clone_type):
            return None

        return CloneCandidate(
            file1=m.location1.file,
            start_line1=m.location1.start_line,
            end_line1=m.location1.end_line,
            file2=m.location2.file,
            start_line2=m.location2.start_line,
            end_line2=m.location2.end_line,
            similarity=similarity,
            clone_type=clone_type,
            duplicated_lines=duplicated_lines,
        )

    def passes_thresholds(self, candidate: CloneCandidate) -> bool:
        if candidate.duplicated_lines < self.thresholds.min_lines:
            return False
        if not self.thresholds.should_detect(candidate.clone_type):
            return False
        return self.thresholds.meets_threshold(
            candidate.similarity, candidate.clone_type
        )

    def deduplicate_candidates(
        self, candidates: Sequence[CloneCandidate]
    ) -> list[CloneCandidate]:
        """
        Greedy overlap resolution, highest similarity first.

        An accepted candidate consumes every still-unused candidate that
        overlaps it, and consumed candidates are never reconsidered. In a
        chain A-B-C where only neighbours overlap, accepting A consumes B for
        good, even if B alone would have covered more lines than A and C.
        """
        if not candidates:
            return []

        order = sorted(
            range(len(candidates)),
            key=cmp_to_key(
                lambda i, j: _compare_similarity_desc(candidates[i], candidates[j])
            ),
        )
        used = [False] * len(candidates)
        result: list[CloneCandidate] = []

        for i in order:
            if used[i]:
                continue

            candidate = candidates[i]
            if any(candidates_overlap(candidate, kept) for kept in result):
                used[i] = True
                continue

            result.append(candidate)
            used[i] = True
            for j, other in enumerate(candidates):
                if not used[j] and candidates_overlap(candidate, other):
                    used[j] = True

        return result
