"""Configuration for a business DNA extraction run.

Two layers:
- **TotalContentConfig**: per-run budget and feature switches (dataclass, env overridable)
- **Thresholds**: scoring weights and sparsity cut-offs, loaded once from
  ``config/thresholds.yaml`` with built-in defaults when the file is absent

Usage:
    from business_dna.config import TotalContentConfig, get_thresholds

    config = TotalContentConfig.from_env(max_pages=6)
    thresholds = get_thresholds()
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

from business_dna import constants
from business_dna.schemas.dna import ContentSparsity
from business_dna.schemas.page import SemanticIntent

logger = logging.getLogger(__name__)

ENV_PREFIX = "BUSINESS_DNA_"
THRESHOLDS_ENV_VAR = "BUSINESS_DNA_THRESHOLDS"


@dataclass
class TotalContentConfig:
    """Budget and feature switches for one pipeline run.

    Attributes:
        max_pages: Hard cap on pages extracted
        max_depth: Maximum link depth from the seed URL
        page_timeout: Per-page render timeout in seconds
        crawl_timeout: Whole-crawl budget in seconds
        enable_ocr: Request OCR text from the vision service
        enable_color_extraction: Request dominant colors from the vision service
        enable_semantic_captions: Request captions from the vision service
        max_images_for_vision: Images sent to the vision service (rest pass through)
        vision_concurrency: Concurrent vision requests
        max_images_per_page: Image URLs kept per page
        max_total_images: Unique image URLs kept per run
        priority_paths: Path substrings crawled ahead of everything else
    """

    # Crawl budget
    max_pages: int = constants.DEFAULT_MAX_PAGES
    max_depth: int = constants.DEFAULT_MAX_DEPTH
    page_timeout: float = constants.DEFAULT_PAGE_TIMEOUT_SECONDS
    crawl_timeout: float = constants.DEFAULT_CRAWL_TIMEOUT_SECONDS

    # Vision switches
    enable_ocr: bool = True
    enable_color_extraction: bool = True
    enable_semantic_captions: bool = True
    max_images_for_vision: int = constants.DEFAULT_MAX_IMAGES_FOR_VISION
    vision_concurrency: int = constants.DEFAULT_VISION_CONCURRENCY

    # Image collection
    max_images_per_page: int = constants.DEFAULT_MAX_IMAGES_PER_PAGE
    max_total_images: int = constants.DEFAULT_MAX_TOTAL_IMAGES

    priority_paths: list[str] = field(default_factory=lambda: list(constants.PRIORITY_PATHS))

    def __post_init__(self):
        """Reject budgets that would make the crawl meaningless."""
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be >= 1, got {self.max_pages}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.page_timeout <= 0 or self.crawl_timeout <= 0:
            raise ValueError("page_timeout and crawl_timeout must be positive")
        if self.vision_concurrency < 1:
            raise ValueError(f"vision_concurrency must be >= 1, got {self.vision_concurrency}")
        if self.max_images_for_vision < 0:
            raise ValueError(f"max_images_for_vision must be >= 0, got {self.max_images_for_vision}")

    @property
    def vision_enabled(self) -> bool:
        return self.enable_ocr or self.enable_color_extraction or self.enable_semantic_captions

    @classmethod
    def from_env(cls, **overrides) -> "TotalContentConfig":
        """Build a config from ``BUSINESS_DNA_*`` environment variables.

        Explicit keyword overrides win over the environment.
        """
        values = {}
        for f in fields(cls):
            if f.name == "priority_paths":
                raw = os.environ.get(f"{ENV_PREFIX}PRIORITY_PATHS")
                if raw:
                    values[f.name] = [p.strip() for p in raw.split(",") if p.strip()]
                continue
            raw = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is None:
                continue
            if f.type in (bool, "bool"):
                values[f.name] = raw.strip().lower() in ("1", "true", "yes", "on")
            elif f.type in (int, "int"):
                values[f.name] = int(raw)
            else:
                values[f.name] = float(raw)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class Thresholds:
    """Scoring weights and cut-offs shared by the classifier and consolidator."""

    # Intent scoring
    path_match_weight: float = 0.5  # Added once per intent when the URL path matches
    title_match_weight: float = 0.2  # Added once per intent when the title matches
    content_hit_weight: float = 0.1  # Per body occurrence
    content_hit_cap: float = 0.3  # Max body contribution per pattern
    body_window: int = constants.CLASSIFIER_BODY_WINDOW

    # Per-intent multipliers, keyed by intent value; unknown keys are rejected
    intent_weights: dict[str, float] = field(default_factory=dict)

    # Content sparsity
    sparsity_rich_chars: int = constants.SPARSITY_RICH_CHARS
    sparsity_moderate_chars: int = constants.SPARSITY_MODERATE_CHARS

    def __post_init__(self):
        if self.sparsity_moderate_chars >= self.sparsity_rich_chars:
            raise ValueError(
                f"sparsity_moderate_chars ({self.sparsity_moderate_chars}) must be below "
                f"sparsity_rich_chars ({self.sparsity_rich_chars})"
            )
        for name, weight in self.intent_weights.items():
            if weight < 0:
                raise ValueError(f"Intent weight for {name} must be >= 0, got {weight}")

    def sparsity_for(self, total_chars: int) -> ContentSparsity:
        if total_chars > self.sparsity_rich_chars:
            return ContentSparsity.RICH
        if total_chars > self.sparsity_moderate_chars:
            return ContentSparsity.MODERATE
        return ContentSparsity.SPARSE


# Module-level cache
_thresholds_cache: Optional[Thresholds] = None


def _get_thresholds_path() -> Path:
    override = os.environ.get(THRESHOLDS_ENV_VAR)
    if override:
        return Path(override)
    return Path(__file__).parent.parent / "config" / "thresholds.yaml"


def _load_thresholds() -> Thresholds:
    """Load and validate thresholds from YAML."""
    config_path = _get_thresholds_path()
    if not config_path.exists():
        logger.warning(f"Thresholds config not found at {config_path}, using defaults")
        return Thresholds()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    known = {f.name for f in fields(Thresholds)}
    unexpected = set(raw) - known
    if unexpected:
        raise ValueError(f"Thresholds config {config_path} has unexpected keys: {sorted(unexpected)}")

    valid_intents = {intent.value for intent in SemanticIntent}
    bad_intents = set(raw.get("intent_weights", {}) or {}) - valid_intents
    if bad_intents:
        raise ValueError(f"Thresholds config {config_path} has unknown intents: {sorted(bad_intents)}")

    thresholds = Thresholds(**{k: v for k, v in raw.items() if v is not None})
    logger.info(f"Loaded thresholds from {config_path}")
    return thresholds


def get_thresholds() -> Thresholds:
    """Get the cached thresholds, loading them on first use."""
    global _thresholds_cache
    if _thresholds_cache is None:
        _thresholds_cache = _load_thresholds()
    return _thresholds_cache


def clear_cache():
    """Clear the thresholds cache (useful for testing)."""
    global _thresholds_cache
    _thresholds_cache = None
