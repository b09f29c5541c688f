"""CLI interface for vocab-masker.

Usage:
    # Mask vocabulary hits in plain text and JSON-lines corpora
    vocab-masker -c entities.tsv -t notes.txt corpus-000.jsonl.gz -o report.csv

    # Drop common words using a remote word list
    vocab-masker -c entities.tsv -t corpus/*.gz -o report.csv \\
        --banned-url https://example.org/common-words.txt

    # Everything from a YAML file (flags still override)
    vocab-masker --config run.yaml --max-workers 4

Exit status is 1 when the run aborts.
"""

from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any

from .config import load_banned_stems, load_config, load_from_yaml, matcher_config
from .errors import MaskerError
from .pipeline import run_pipeline
from .vocabulary import load_vocabulary

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(log_file: Path | None = None, level_name: str | None = None) -> None:
    """Send log records to stderr, and to ``log_file`` when given.

    Does nothing if the root logger is already configured.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = (level_name or os.environ.get("VOCAB_MASKER_LOG_LEVEL") or "INFO").upper()
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=_LOG_FORMAT, handlers=handlers)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="vocab-masker",
        description="Find controlled-vocabulary terms in text and mask them",
    )
    parser.add_argument("-c", "--csv", dest="vocabulary", help="Vocabulary file (id<TAB>surface form)")
    parser.add_argument("-t", "--text", dest="inputs", nargs="+", help="Input files (.txt or .gz JSON lines)")
    parser.add_argument("-o", "--output", help="Report output path")
    parser.add_argument("--config", type=Path, help="YAML config file")
    parser.add_argument("--text-field", help="JSON field holding the nested text object")
    parser.add_argument("--id-field", help="JSON field holding the document id")
    parser.add_argument("--max-lines", type=int, help="Max parsed JSON lines per input file")
    parser.add_argument("--max-workers", type=int, help="Worker pool size")
    parser.add_argument("--banned-url", help="URL of the common-word list")
    parser.add_argument("--banned-file", help="Local common-word list (overrides --banned-url)")
    parser.add_argument("--no-progress", action="store_true", help="Hide progress bars")
    parser.add_argument("--log-level", help="Logging level (default INFO)")
    parser.add_argument("--log-file", type=Path, help="Also log to this file")
    return parser.parse_args(argv)


def _merge_args(args: argparse.Namespace) -> dict[str, Any]:
    """Combine the optional YAML config with command-line overrides."""
    data: dict[str, Any] = {}
    if args.config is not None:
        data = dict(load_from_yaml(args.config))
        data["banned_words"] = {"url": data.pop("banned_url"), "path": data.pop("banned_path")}

    overrides = {
        "vocabulary": args.vocabulary,
        "inputs": args.inputs,
        "output": args.output,
        "text_field": args.text_field,
        "id_field": args.id_field,
        "max_lines": args.max_lines,
        "max_workers": args.max_workers,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})

    banned = data.setdefault("banned_words", {})
    if args.banned_url:
        banned["url"] = args.banned_url
    if args.banned_file:
        banned["path"] = args.banned_file
    if args.no_progress:
        data["progress"] = False
    return load_config(data)


def run(cfg: dict[str, Any]) -> None:
    """Build the vocabulary and run the pipeline for a normalized config."""
    banned = load_banned_stems(cfg)
    if not banned:
        logger.warning("No banned word list configured; common words will not be filtered")

    vocabulary = load_vocabulary(
        cfg["vocabulary"],
        banned,
        min_length=cfg["min_length"],
        progress=cfg["progress"],
    )
    run_pipeline(
        vocabulary,
        cfg["inputs"],
        cfg["output"],
        text_field=cfg["text_field"],
        id_field=cfg["id_field"],
        max_lines=cfg["max_lines"],
        matcher_config=matcher_config(cfg),
        max_workers=cfg["max_workers"],
        progress=cfg["progress"],
    )


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    setup_logging(log_file=args.log_file, level_name=args.log_level)

    try:
        run(_merge_args(args))
    except MaskerError as exc:
        logger.error("Run aborted: %s", exc)
        sys.exit(1)
    except OSError as exc:
        logger.error("Run aborted: %s: %s", getattr(exc, "filename", None) or "I/O error", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
