"""Pipeline — fan input files out to a worker pool and merge their reports.

Usage:
    from vocab_masker import Vocabulary, run_pipeline

    summary = run_pipeline(vocab, ["a.txt", "b.jsonl.gz"], "report.csv")

Each worker owns one input file and one part file.  When it finishes it
posts the part path to a queue; once every worker is done the queue is
drained and the parts are concatenated in arrival order.  There is no
ordering across input files beyond that.

Fatal errors (unsupported extension, missing document id) abort the whole
run.  An I/O error on a single input file, including a truncated or
corrupt gzip stream, only abandons that file.
"""

from __future__ import annotations
import logging
import queue
import zlib
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

from tqdm import tqdm

from .matcher import Matcher, MatcherConfig
from .reader import DEFAULT_ID_FIELD, DEFAULT_MAX_LINES, DEFAULT_TEXT_FIELD, iter_documents
from .report import discard_parts, merge_parts, open_part, write_records

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Counters for a finished run."""
    files_processed: int = 0
    files_failed: int = 0
    documents: int = 0
    records: int = 0


@dataclass
class _FileResult:
    documents: int = 0
    records: int = 0
    failed: bool = False


def _process_file(
    path: Path,
    matcher: Matcher,
    output_path: Path,
    channel: queue.Queue[Path],
    *,
    text_field: str,
    id_field: str,
    max_lines: int,
) -> _FileResult:
    """Worker body: scan one input file into a private part file."""
    documents = iter_documents(path, text_field=text_field, id_field=id_field, max_lines=max_lines)
    result = _FileResult()
    fh, part = open_part(output_path)
    try:
        with fh:
            for doc in documents:
                result.documents += 1
                result.records += write_records(matcher.scan(doc.raw_text, doc.document_id), fh)
    except (OSError, EOFError, UnicodeDecodeError, zlib.error) as exc:
        logger.error("Abandoning %s: %s", path, exc)
        discard_parts([part])
        result.failed = True
        return result
    except Exception:
        discard_parts([part])
        raise

    logger.info("Finished %s: %d documents, %d records", path, result.documents, result.records)
    channel.put(part)
    return result


def _drain(channel: queue.Queue[Path]) -> list[Path]:
    parts: list[Path] = []
    while True:
        try:
            parts.append(channel.get_nowait())
        except queue.Empty:
            return parts


def run_pipeline(
    vocabulary: Mapping[str, int],
    inputs: Iterable[str | Path],
    output_path: str | Path,
    *,
    text_field: str = DEFAULT_TEXT_FIELD,
    id_field: str = DEFAULT_ID_FIELD,
    max_lines: int = DEFAULT_MAX_LINES,
    matcher_config: MatcherConfig | None = None,
    max_workers: int | None = None,
    progress: bool = True,
) -> RunSummary:
    """Scan every input file and write one merged report to ``output_path``."""
    output_path = Path(output_path)
    paths = [Path(p) for p in inputs]
    matcher = Matcher(vocabulary, matcher_config)
    channel: queue.Queue[Path] = queue.Queue()
    summary = RunSummary()

    logger.info("Processing %d input files", len(paths))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_path = {
            executor.submit(
                _process_file,
                path,
                matcher,
                output_path,
                channel,
                text_field=text_field,
                id_field=id_field,
                max_lines=max_lines,
            ): path
            for path in paths
        }
        try:
            for future in tqdm(
                as_completed(future_to_path),
                total=len(future_to_path),
                desc="Input files",
                disable=not progress,
            ):
                result = future.result()
                if result.failed:
                    summary.files_failed += 1
                    continue
                summary.files_processed += 1
                summary.documents += result.documents
                summary.records += result.records
        except Exception as exc:
            logger.error("Aborting run on %s: %s", future_to_path[future], exc)
            executor.shutdown(wait=True, cancel_futures=True)
            discard_parts(_drain(channel))
            raise

    parts = _drain(channel)
    try:
        merge_parts(parts, output_path)
    finally:
        discard_parts(parts)
    logger.info(
        "Run summary: files=%d, failed=%d, documents=%d, records=%d",
        summary.files_processed,
        summary.files_failed,
        summary.documents,
        summary.records,
    )
    return summary
