"""Matcher — the main API.  Paragraph-scoped bigram/unigram lookup and masking.

Usage:
    from vocab_masker import Matcher, Vocabulary

    vocab = Vocabulary({"Apple": 1, "Apple juice": 2})
    matcher = Matcher(vocab)      # reusable, thread-safe (read-only state)

    for record in matcher.scan("I like apple juice.", document_id="42"):
        print(record.surface_form, record.masked_context)
        # Apple juice  I like <MASK>.

Matching trails the text by one token: a word is only looked up on its own
once the following word is known, so that the bigram gets first pick.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Iterator, Mapping

from .types import DetectionRecord, Token
from .vocabulary import MIN_LENGTH, lower_first, title_case

PARAGRAPH_SEPARATOR = "\n\n"

# Characters that end a token
SEPARATORS = " \t\n\r.,;:!?\"'()[]{}"
_SPLIT = re.compile("[" + re.escape(SEPARATORS) + "]")


@dataclass
class MatcherConfig:
    """Configuration for the Matcher."""
    min_length: int = MIN_LENGTH      # shorter words never match
    mask_token: str = "<MASK>"


def iter_tokens(paragraph: str) -> Iterator[Token]:
    """Split a paragraph on separator characters.

    Consecutive separators yield empty tokens, which break bigram adjacency.
    """
    offset = 0
    for text in _SPLIT.split(paragraph):
        yield Token(offset=offset, text=text)
        offset += len(text) + 1


class Matcher:
    """Finds vocabulary entries in text and masks them per paragraph."""

    def __init__(self, vocabulary: Mapping[str, int], config: MatcherConfig | None = None) -> None:
        self.vocabulary = vocabulary
        self.config = config or MatcherConfig()

    def scan(self, text: str, document_id: str = "") -> list[DetectionRecord]:
        """Scan every paragraph of ``text``; records come back in text order."""
        records: list[DetectionRecord] = []
        for paragraph in text.split(PARAGRAPH_SEPARATOR):
            records.extend(self.scan_paragraph(paragraph, document_id))
        return records

    def scan_paragraph(self, paragraph: str, document_id: str = "") -> list[DetectionRecord]:
        """Scan a single paragraph.  Each key is reported at most once."""
        min_length = self.config.min_length
        seen: set[str] = set()
        records: list[DetectionRecord] = []
        last_word = ""

        for token in iter_tokens(paragraph):
            word = token.text
            bigram = f"{last_word} {word}"
            if len(word) >= min_length and bigram in self.vocabulary and bigram not in seen:
                key = bigram
            elif self._unigram_hit(last_word, seen):
                key = last_word
            else:
                key = None

            if key is not None:
                seen.add(key)
                records.append(self._record(paragraph, key, document_id))
            last_word = title_case(word)

        # The loop only ever looks one token back; check the tail token here.
        if self._unigram_hit(last_word, seen):
            records.append(self._record(paragraph, last_word, document_id))

        return records

    def _unigram_hit(self, word: str, seen: set[str]) -> bool:
        return (
            len(word) >= self.config.min_length
            and word in self.vocabulary
            and word not in seen
        )

    def _record(self, paragraph: str, key: str, document_id: str) -> DetectionRecord:
        mask = self.config.mask_token
        masked = paragraph.replace(title_case(key), mask).replace(lower_first(key), mask)
        return DetectionRecord(
            masked_context=masked,
            surface_form=key,
            identifier=self.vocabulary[key],
            document_id=document_id,
        )


def scan(vocabulary: Mapping[str, int], text: str, document_id: str = "") -> list[DetectionRecord]:
    """Convenience wrapper: scan ``text`` with a default-configured Matcher."""
    return Matcher(vocabulary).scan(text, document_id)
