"""vocab-masker — find controlled-vocabulary terms in text corpora and mask them."""

from .matcher import Matcher, MatcherConfig, scan
from .vocabulary import Vocabulary, build_vocabulary, load_vocabulary
from .noise import build_banned_stems, normalize
from .reader import iter_documents
from .pipeline import RunSummary, run_pipeline
from .config import load_config, load_from_yaml
from .types import DetectionRecord, Document
from .errors import MaskerError

__all__ = [
    "Matcher", "MatcherConfig", "scan",
    "Vocabulary", "build_vocabulary", "load_vocabulary",
    "build_banned_stems", "normalize",
    "iter_documents",
    "RunSummary", "run_pipeline",
    "load_config", "load_from_yaml",
    "DetectionRecord", "Document",
    "MaskerError",
]
__version__ = "0.1.0"
