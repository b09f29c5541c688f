"""Document readers — turn input files into a stream of Documents.

Two shapes are supported:
    *.txt   the whole file is one Document with an empty id
    *.gz    gzip-compressed JSON lines; each line is a Document whose
            text lives at ``line[text_field]["text"]`` and whose id is
            ``line[id_field]``

A missing or non-integer id aborts the run.  Empty lines, unparseable lines and
lines without text are skipped.
"""

from __future__ import annotations
import gzip
import json
import logging
from pathlib import Path
from typing import Any, Iterator

from .errors import InvalidDocumentIdError, MissingDocumentIdError, UnsupportedInputError
from .types import Document

logger = logging.getLogger(__name__)

DEFAULT_TEXT_FIELD = "content"
DEFAULT_ID_FIELD = "corpusid"
DEFAULT_MAX_LINES = 1000


def read_plain(path: str | Path) -> Iterator[Document]:
    """Yield the whole file as a single Document."""
    yield Document(raw_text=Path(path).read_text(encoding="utf-8"))


def _extract_text(obj: Any, text_field: str) -> str | None:
    if not isinstance(obj, dict):
        return None
    container = obj.get(text_field)
    if isinstance(container, dict):
        text = container.get("text")
        if isinstance(text, str):
            return text
    return None


def read_jsonl_gz(
    path: str | Path,
    *,
    text_field: str = DEFAULT_TEXT_FIELD,
    id_field: str = DEFAULT_ID_FIELD,
    max_lines: int = DEFAULT_MAX_LINES,
) -> Iterator[Document]:
    """Yield one Document per JSON line, up to ``max_lines`` parsed lines."""
    parsed = 0
    with gzip.open(path, "rt", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if parsed >= max_lines:
                logger.info("%s: stopping after %d parsed lines", path, max_lines)
                break
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as exc:
                logger.warning("%s:%d: skipping unparseable line: %s", path, line_no, exc)
                continue
            parsed += 1

            text = _extract_text(obj, text_field)
            if text is None:
                logger.debug("%s:%d: no %r text, skipping", path, line_no, text_field)
                continue
            if id_field not in obj:
                raise MissingDocumentIdError(path, line_no, id_field)

            doc_id = obj[id_field]
            if not isinstance(doc_id, int) or isinstance(doc_id, bool):
                raise InvalidDocumentIdError(path, line_no, id_field, doc_id)

            yield Document(raw_text=text, document_id=str(doc_id))


def iter_documents(
    path: str | Path,
    *,
    text_field: str = DEFAULT_TEXT_FIELD,
    id_field: str = DEFAULT_ID_FIELD,
    max_lines: int = DEFAULT_MAX_LINES,
) -> Iterator[Document]:
    """Pick a reader by file extension."""
    suffix = Path(path).suffix.lower()
    if suffix == ".txt":
        return read_plain(path)
    if suffix == ".gz":
        return read_jsonl_gz(path, text_field=text_field, id_field=id_field, max_lines=max_lines)
    raise UnsupportedInputError(path)
