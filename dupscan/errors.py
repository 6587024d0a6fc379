"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""


class DupScanError(Exception):
    """Base exception for DupScan."""


class FileProcessingError(DupScanError):
    """A source file could not be read or decoded."""

    __slots__ = ("path",)

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message)
        self.path = path


class ValidationError(DupScanError):
    """Input validation failed."""
