"""Report output — one CSV-like line per DetectionRecord.

Line format (no header):

    "surface_form",identifier,"masked_context",document_id

Embedded double quotes are escaped as ``\\"``.  Each worker writes to its
own part file; the orchestrator concatenates the parts at the end.
"""

from __future__ import annotations
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import IO, Iterable

from .types import DetectionRecord

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


def format_record(record: DetectionRecord) -> str:
    """Render one report line, including the trailing newline."""
    return (
        f"{_quote(record.surface_form)},{record.identifier},"
        f"{_quote(record.masked_context)},{record.document_id}\n"
    )


def write_records(records: Iterable[DetectionRecord], fh: IO[str]) -> int:
    """Append records to an open text file.  Returns the number written."""
    count = 0
    for record in records:
        fh.write(format_record(record))
        count += 1
    return count


def open_part(output_path: str | Path) -> tuple[IO[str], Path]:
    """Create a worker-private part file next to the final output."""
    directory = Path(output_path).resolve().parent
    directory.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix=".vocab-masker-", suffix=".part", dir=directory)
    return os.fdopen(fd, "w", encoding="utf-8", newline=""), Path(name)


def merge_parts(parts: Iterable[Path], output_path: str | Path) -> int:
    """Concatenate part files into ``output_path`` in the given order.

    Each part is deleted once it has been copied.  Returns bytes written.
    """
    written = 0
    with open(output_path, "wb") as out:
        for part in parts:
            with open(part, "rb") as src:
                shutil.copyfileobj(src, out)
            written += part.stat().st_size
            part.unlink()
            logger.debug("Merged and removed %s", part)
    return written


def discard_parts(parts: Iterable[Path]) -> None:
    """Remove part files left behind by an aborted run."""
    for part in parts:
        part.unlink(missing_ok=True)
