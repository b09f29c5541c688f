"""Vocabulary — read-only mapping from surface form to numeric identifier.

Design goals:
  - Built once before any matching starts, then shared by every worker
  - Keys are title-cased ("first letter upper, rest as-is")
  - Duplicate keys after normalization: last write wins, silently
"""

from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import AbstractSet, Iterable, Iterator, Mapping

from tqdm import tqdm

from .errors import VocabularyError
from .noise import normalize

logger = logging.getLogger(__name__)

MIN_LENGTH = 5
_U32_MAX = 2**32 - 1
_U32 = re.compile(r"\+?[0-9]+")


def title_case(word: str) -> str:
    """Upper-case the first character, leave the rest untouched."""
    return word[:1].upper() + word[1:]


def lower_first(word: str) -> str:
    """Lower-case the first character, leave the rest untouched."""
    return word[:1].lower() + word[1:]


def _parse_identifier(value: str, line_no: int) -> int:
    if not _U32.fullmatch(value):
        raise VocabularyError(line_no, value)
    ident = int(value)
    if ident > _U32_MAX:
        raise VocabularyError(line_no, value)
    return ident


class Vocabulary(Mapping[str, int]):
    """Immutable surface form → identifier mapping."""

    __slots__ = ("_entries", "skipped")

    def __init__(self, entries: Mapping[str, int] | None = None, *, skipped: int = 0) -> None:
        self._entries: dict[str, int] = dict(entries or {})
        self.skipped = skipped

    def __getitem__(self, key: str) -> int:
        return self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Vocabulary({len(self._entries)} entries, skipped={self.skipped})"


def build_vocabulary(
    lines: Iterable[str],
    banned: AbstractSet[str] = frozenset(),
    *,
    min_length: int = MIN_LENGTH,
) -> Vocabulary:
    """Parse ``identifier<TAB>surface_form`` lines into a Vocabulary.

    Lines that don't split into exactly two fields are ignored.  Surface
    forms shorter than ``min_length`` or whose stem is in ``banned`` are
    skipped.  A non-numeric identifier aborts the whole build.
    """
    entries: dict[str, int] = {}
    skipped = 0
    for line_no, line in enumerate(lines, start=1):
        fields = line.rstrip("\r\n").split("\t")
        if len(fields) != 2:
            continue
        raw_id, surface = fields[0].strip(), fields[1].strip()

        if len(surface) < min_length or normalize(surface) in banned:
            skipped += 1
            continue

        entries[title_case(surface)] = _parse_identifier(raw_id, line_no)

    logger.info("Vocabulary built: %d entries, %d skipped", len(entries), skipped)
    return Vocabulary(entries, skipped=skipped)


def estimate_lines(path: str | Path) -> int:
    """Count lines in a file (used as the progress bar total)."""
    with open(path, "rb") as f:
        return sum(1 for _ in f)


def load_vocabulary(
    path: str | Path,
    banned: AbstractSet[str] = frozenset(),
    *,
    min_length: int = MIN_LENGTH,
    progress: bool = True,
) -> Vocabulary:
    """Read a vocabulary file.  I/O errors propagate."""
    total = estimate_lines(path)
    logger.info("Loading vocabulary from %s (%d lines)", path, total)
    with open(path, encoding="utf-8") as f:
        lines = tqdm(f, total=total, desc="Vocabulary", disable=not progress)
        return build_vocabulary(lines, banned, min_length=min_length)
