"""Custom exceptions for pagerecon."""
from __future__ import annotations

from typing import Optional


class PageReconError(RuntimeError):
    """Base class for all pagerecon exceptions."""


class SourceUnavailableError(PageReconError):
    """Raised when the input bytes could not be obtained."""


class UnsupportedFileTypeError(PageReconError, ValueError):
    """Raised when the file type is neither of the supported kinds."""

    def __init__(self, file_type: Optional[str]):
        self.file_type = file_type
        super().__init__(f"Unsupported file type: {file_type}")


class DocumentParseError(PageReconError):
    """Raised when the byte buffer cannot be parsed as the declared type."""


class PageParseError(PageReconError):
    """Raised when the content of a single page could not be extracted."""

    def __init__(self, page_number: int, reason: str):
        self.page_number = page_number
        super().__init__(f"Failed to extract page {page_number}: {reason}")
