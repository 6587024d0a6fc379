"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import ValidationError
from .tokenizer import Token

HASH_BASE: Final = 31
HASH_MODULUS: Final = 1_000_000_007


def sha1(s: str) -> str:
    return hashlib.sha1(s.encode("utf-8")).hexdigest()


def token_value(text: str, modulus: int = HASH_MODULUS) -> int:
    # Stable across processes, unlike the builtin str hash.
    return int(sha1(text)[:16], 16) % modulus


def lines_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Inclusive line ranges; touching boundaries count as overlap."""
    return not (end1 < start2 or end2 < start1)


@dataclass(frozen=True, slots=True)
class Fingerprint:
    value: int


@dataclass(frozen=True, slots=True)
class FingerprintLocation:
    file: Path
    start_line: int
    end_line: int
    token_count: int

    @property
    def line_count(self) -> int:
        return max(self.end_line - self.start_line, 0) + 1


@dataclass(frozen=True, slots=True)
class FingerprintMatch:
    location1: FingerprintLocation
    location2: FingerprintLocation
    fingerprint: Fingerprint


@dataclass(frozen=True, slots=True)
class FingerprintStats:
    total_fingerprints: int
    total_locations: int
    unique_fingerprints: int
    duplicate_fingerprints: int


class TokenFingerprinter:
    """
    Rabin-Karp index of fixed-size token windows.

    Every contiguous ``window_size`` slice of a file's tokens is hashed with a
    polynomial rolling hash and the window's location is filed under that
    hash. Locations accumulate across ``fingerprint_file`` calls on the same
    instance until ``clear`` is called, so one instance covers one batch of
    files. Buckets holding two or more locations are duplicate candidates.
    """

    __slots__ = ("_index", "base", "base_power", "modulus", "window_size")

    def __init__(self, window_size: int) -> None:
        if window_size < 1:
            raise ValidationError(
                f"Fingerprint window size must be positive, got {window_size}"
            )
        self.window_size = window_size
        self.base = HASH_BASE
        self.modulus = HASH_MODULUS
        self.base_power = pow(self.base, window_size - 1, self.modulus)
        self._index: dict[Fingerprint, list[FingerprintLocation]] = {}

    def token_value(self, text: str) -> int:
        return token_value(text, self.modulus)

    def initial_hash(self, texts: Sequence[str]) -> int:
        h = 0
        for text in texts[: self.window_size]:
            h = (h * self.base + self.token_value(text)) % self.modulus
        return h

    def rolling_hash(self, current: int, old_text: str, new_text: str) -> int:
        old_contribution = (self.token_value(old_text) * self.base_power) % self.modulus
        h = (current + self.modulus - old_contribution) % self.modulus
        return (h * self.base + self.token_value(new_text)) % self.modulus

    def _add(self, h: int, location: FingerprintLocation) -> None:
        self._index.setdefault(Fingerprint(h), []).append(location)

    def fingerprint_file(self, file: str | Path, tokens: Sequence[Token]) -> None:
        window = self.window_size
        if len(tokens) < window:
            return

        path = Path(file)
        texts = [t.text for t in tokens]

        h = self.initial_hash(texts[:window])
        self._add(
            h,
            FingerprintLocation(
                file=path,
                start_line=tokens[0].line,
                end_line=tokens[window - 1].line,
                token_count=window,
            ),
        )

        for i in range(1, len(tokens) - window + 1):
            h = self.rolling_hash(h, texts[i - 1], texts[i + window - 1])
            self._add(
                h,
                FingerprintLocation(
                    file=path,
                    start_line=tokens[i].line,
                    end_line=tokens[i + window - 1].line,
                    token_count=window,
                ),
            )

    def find_duplicates(self) -> list[FingerprintMatch]:
        matches: list[FingerprintMatch] = []
        for fingerprint, locations in self._index.items():
            if len(locations) < 2:
                continue

            for i, loc1 in enumerate(locations):
                for loc2 in locations[i + 1 :]:
                    # A window sliding over itself is not a clone.
                    if loc1.file == loc2.file and lines_overlap(
                        loc1.start_line, loc1.end_line, loc2.start_line, loc2.end_line
                    ):
                        continue
                    matches.append(
                        FingerprintMatch(
                            location1=loc1,
                            location2=loc2,
                            fingerprint=fingerprint,
                        )
                    )
        return matches

    def clear(self) -> None:
        self._index.clear()

    def stats(self) -> FingerprintStats:
        total = len(self._index)
        duplicates = sum(1 for locs in self._index.values() if len(locs) > 1)
        return FingerprintStats(
            total_fingerprints=total,
            total_locations=sum(len(locs) for locs in self._index.values()),
            unique_fingerprints=total - duplicates,
            duplicate_fingerprints=duplicates,
        )
