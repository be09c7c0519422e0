"""Hidden gems: founding dates, awards, certifications, stats and slogans read from image text."""

from typing import Iterable

from business_dna import constants
from business_dna.extractors.rules import GEM_RULES, GemRule
from business_dna.schemas.entities import HiddenGem


def extract_hidden_gems(ocr_text: str, image_url: str, rules: list[GemRule] = GEM_RULES) -> list[HiddenGem]:
    """
    Run every gem rule family over one image's OCR text.

    Returns:
        Gems in rule order, unique case-insensitively by text, at most 15
    """
    if not ocr_text:
        return []

    gems = []
    for gem_rule in rules:
        for match in gem_rule.pattern.finditer(ocr_text):
            text = (match.group(1) if gem_rule.use_group else match.group(0)).strip()
            if not (gem_rule.min_length <= len(text) <= gem_rule.max_length):
                continue
            gems.append(
                HiddenGem(
                    type=gem_rule.type,
                    text=text,
                    source=image_url,
                    confidence=gem_rule.confidence,
                    display_suggestion=gem_rule.display_suggestion,
                )
            )
    return merge_hidden_gems([gems])


def merge_hidden_gems(groups: Iterable[Iterable[HiddenGem]], limit: int = constants.MAX_HIDDEN_GEMS) -> list[HiddenGem]:
    """Flatten gem lists keeping the first occurrence of each text (case-insensitive)."""
    merged: list[HiddenGem] = []
    seen: set[str] = set()
    for group in groups:
        for gem in group:
            key = gem.text.lower()
            if key in seen:
                continue
            seen.add(key)
            merged.append(gem)
            if len(merged) >= limit:
                return merged
    return merged


def extract_hidden_gems_from_images(ocr_texts: Iterable[tuple[str, str]]) -> list[HiddenGem]:
    """Gems across a run: ``ocr_texts`` is (image_url, text) pairs in image order."""
    return merge_hidden_gems(extract_hidden_gems(text, url) for url, text in ocr_texts)
