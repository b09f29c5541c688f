"""YAML/dict config loader for vocab-masker.

Supports loading from a YAML file or a plain dict (for embedding in a
larger config).

Example YAML:

    vocab_masker:
      vocabulary: data/entities.tsv
      inputs:
        - corpus/part-000.jsonl.gz
        - corpus/notes.txt
      output: out/report.csv
      text_field: content
      id_field: corpusid
      max_lines: 1000
      min_length: 5
      mask_token: "<MASK>"
      max_workers: 8
      progress: true
      banned_words:
        url: https://example.org/common-words.txt
        path: data/common-words.txt   # used instead of url when present
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .matcher import MatcherConfig
from .noise import build_banned_stems, fetch_banned_words, read_banned_words
from .reader import DEFAULT_ID_FIELD, DEFAULT_MAX_LINES, DEFAULT_TEXT_FIELD
from .vocabulary import MIN_LENGTH

_REQUIRED = ("vocabulary", "inputs", "output")


def load_config(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    # Support nested under "vocab_masker" key or flat
    if "vocab_masker" in data:
        data = data["vocab_masker"] or {}

    missing = [key for key in _REQUIRED if not data.get(key)]
    if missing:
        raise ConfigError(f"missing required config keys: {', '.join(missing)}")

    inputs = data["inputs"]
    if isinstance(inputs, str):
        inputs = [inputs]

    banned = data.get("banned_words") or {}
    return {
        "vocabulary": str(data["vocabulary"]),
        "inputs": [str(p) for p in inputs],
        "output": str(data["output"]),
        "text_field": data.get("text_field", DEFAULT_TEXT_FIELD),
        "id_field": data.get("id_field", DEFAULT_ID_FIELD),
        "max_lines": int(data.get("max_lines", DEFAULT_MAX_LINES)),
        "min_length": int(data.get("min_length", MIN_LENGTH)),
        "mask_token": data.get("mask_token", "<MASK>"),
        "max_workers": data.get("max_workers"),
        "progress": bool(data.get("progress", True)),
        "banned_url": banned.get("url"),
        "banned_path": banned.get("path"),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    with open(path) as f:
        return load_config(yaml.safe_load(f) or {})


def matcher_config(cfg: dict[str, Any]) -> MatcherConfig:
    """Build the MatcherConfig for a normalized config."""
    return MatcherConfig(min_length=cfg["min_length"], mask_token=cfg["mask_token"])


def load_banned_stems(cfg: dict[str, Any]) -> frozenset[str]:
    """Resolve the banned word source: local path first, then URL, else empty."""
    if cfg.get("banned_path"):
        return build_banned_stems(read_banned_words(cfg["banned_path"]))
    if cfg.get("banned_url"):
        return build_banned_stems(fetch_banned_words(cfg["banned_url"]))
    return frozenset()
