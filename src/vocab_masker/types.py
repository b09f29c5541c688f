"""Core types."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Document:
    """One unit of text handed to the matcher."""
    raw_text: str
    document_id: str = ""      # "" for plain text, corpus id for JSON lines


@dataclass(frozen=True, slots=True)
class Token:
    """A token and the character offset where it starts in its paragraph."""
    offset: int
    text: str


@dataclass(frozen=True, slots=True)
class DetectionRecord:
    """A single vocabulary hit, with its paragraph masked."""
    masked_context: str
    surface_form: str          # the matched vocabulary key
    identifier: int
    document_id: str = ""
