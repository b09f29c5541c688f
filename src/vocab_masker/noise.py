"""Noise filter — banned word stems used to drop common words from the vocabulary.

The word list is fetched once at startup (or read from a local copy),
normalized with lowercase + Porter stemming, and handed to the vocabulary
builder as a frozen set.  The same ``normalize`` must be applied to the
candidate surface forms or the filter never matches anything.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

import requests

from .errors import BannedWordsError

if TYPE_CHECKING:
    from nltk.stem import PorterStemmer

logger = logging.getLogger(__name__)

# Lazy singleton — don't import nltk until first use
_stemmer: PorterStemmer | None = None


def _get_stemmer() -> PorterStemmer:
    """Lazy-init the Porter stemmer."""
    global _stemmer
    if _stemmer is None:
        from nltk.stem import PorterStemmer
        _stemmer = PorterStemmer()
    return _stemmer


def normalize(word: str) -> str:
    """Trim, lowercase and stem a word."""
    return _get_stemmer().stem(word.strip().lower())


def build_banned_stems(source: str | Iterable[str]) -> frozenset[str]:
    """Build the banned stem set from raw text or an iterable of tokens.

    Tokens starting with ``#`` are comments and are ignored.
    """
    tokens = source.split() if isinstance(source, str) else source
    stems = {
        normalize(token)
        for token in tokens
        if token.strip() and not token.strip().startswith("#")
    }
    logger.info("Built banned stem set with %d entries", len(stems))
    return frozenset(stems)


def fetch_banned_words(url: str, *, timeout: float = 30.0) -> str:
    """Download the banned word list."""
    logger.info("Fetching banned word list from %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise BannedWordsError(f"could not fetch {url}: {exc}") from exc
    return response.text


def read_banned_words(path: str | Path) -> str:
    """Read a local copy of the banned word list."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise BannedWordsError(f"could not read {path}: {exc}") from exc
