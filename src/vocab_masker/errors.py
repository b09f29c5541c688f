"""Exceptions raised by vocab_masker.

Everything here aborts a run.  Recoverable problems (malformed vocabulary
lines, bad JSON lines, unreadable input files) are logged and skipped
instead of raised.
"""

from __future__ import annotations
from pathlib import Path


class MaskerError(Exception):
    """Base class for all vocab_masker errors."""


class ConfigError(MaskerError):
    """Missing or invalid configuration."""


class BannedWordsError(MaskerError):
    """The banned-word list could not be fetched or read."""


class VocabularyError(MaskerError):
    """An identifier in the vocabulary source is not an unsigned 32-bit int."""

    def __init__(self, line_no: int, value: str) -> None:
        super().__init__(f"line {line_no}: invalid identifier {value!r}")
        self.line_no = line_no
        self.value = value


class MissingDocumentIdError(MaskerError):
    """A JSON line has no document identifier field."""

    def __init__(self, path: str | Path, line_no: int, field: str) -> None:
        super().__init__(f"{path}:{line_no}: missing {field!r} field")
        self.path = str(path)
        self.line_no = line_no
        self.field = field


class InvalidDocumentIdError(MaskerError):
    """A JSON line has a document id that is not an integer."""

    def __init__(self, path: str | Path, line_no: int, field: str, value: object) -> None:
        super().__init__(f"{path}:{line_no}: {field!r} must be an integer, got {value!r}")
        self.path = str(path)
        self.line_no = line_no
        self.field = field
        self.value = value


class UnsupportedInputError(MaskerError):
    """No document reader handles this file extension."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"unsupported input file type: {path}")
        self.path = str(path)
