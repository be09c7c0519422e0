"""
Rule tables for page classification and OCR fact mining.

Every heuristic is a row: ``Rule(target, pattern, weight, scope)``. One
generic scorer (``score_rules``) evaluates any table, so intent scoring and
tone scoring share the same code path and each table can be tested on its own.

Scopes:
- PATH:  URL path; contributes ``path_match_weight * weight`` once per target
- TITLE: page title; contributes ``title_match_weight * weight`` once per target
- BODY:  first ``body_window`` chars of body text;
         ``min(hits * content_hit_weight, content_hit_cap) * weight`` per rule
- COUNT: whole body text; ``hits * weight`` (raw counting, used for tone)
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from business_dna import constants
from business_dna.config import Thresholds
from business_dna.schemas.entities import HiddenGemType
from business_dna.schemas.page import EmotionalTone, SemanticIntent


class RuleScope(str, Enum):
    PATH = "path"
    TITLE = "title"
    BODY = "body"
    COUNT = "count"


@dataclass(frozen=True)
class Rule:
    target: str
    pattern: re.Pattern
    weight: float = 1.0
    scope: RuleScope = RuleScope.BODY


def rule(target: str, pattern: str, weight: float = 1.0, scope: RuleScope = RuleScope.BODY) -> Rule:
    return Rule(target=target, pattern=re.compile(pattern, re.IGNORECASE), weight=weight, scope=scope)


def score_rules(rules: Iterable[Rule], texts: dict[RuleScope, str], thresholds: Thresholds) -> dict[str, float]:
    """
    Score every target in a rule table against scoped texts.

    Targets appear in the result in first-declared order, including those
    that scored 0, so callers can break ties by iteration order.
    """
    scores: dict[str, float] = {}
    fired: set[tuple[str, RuleScope]] = set()

    for r in rules:
        scores.setdefault(r.target, 0.0)
        text = texts.get(r.scope, "")
        if not text:
            continue

        if r.scope in (RuleScope.PATH, RuleScope.TITLE):
            if (r.target, r.scope) in fired or not r.pattern.search(text):
                continue
            fired.add((r.target, r.scope))
            factor = thresholds.path_match_weight if r.scope == RuleScope.PATH else thresholds.title_match_weight
            scores[r.target] += factor * r.weight

        elif r.scope == RuleScope.BODY:
            hits = sum(1 for _ in r.pattern.finditer(text[: thresholds.body_window]))
            if hits:
                scores[r.target] += min(hits * thresholds.content_hit_weight, thresholds.content_hit_cap) * r.weight

        else:
            scores[r.target] += sum(1 for _ in r.pattern.finditer(text)) * r.weight

    return scores


def best_target(scores: dict[str, float]) -> tuple[str | None, float]:
    """Highest positive score; ties go to the first-declared target."""
    best, best_score = None, 0.0
    for target, score in scores.items():
        if score > best_score:
            best, best_score = target, score
    return best, best_score


# ─── Intent ───

# (intent, path pattern, content pattern, weight); order is the tie-break order
_INTENT_PATTERNS = [
    (
        SemanticIntent.VISION_MISSION,
        r"about|story|mission|vision|philosophy|values",
        r"our mission|our vision|we believe|our purpose|founded|established|journey",
        1.0,
    ),
    (
        SemanticIntent.VALUE_PROPOSITION,
        r"why-us|difference|unique|about",
        r"what makes us|why choose|our difference|unlike|stand out|unique approach",
        0.9,
    ),
    (
        SemanticIntent.SERVICE_OFFERING,
        r"service|offering|what-we-do|solution|product",
        r"we offer|our services|we provide|packages|pricing|starting at",
        1.0,
    ),
    (
        SemanticIntent.TEAM_CULTURE,
        r"team|staff|people|careers|join|culture",
        r"meet our|our team|staff|trainer|coach|therapist|doctor|ceo|founder",
        1.0,
    ),
    (
        SemanticIntent.SOCIAL_PROOF,
        r"testimonial|review|success|case-stud|client",
        r"testimonial|review|said|stars|rated|recommend|loved|amazing experience",
        1.0,
    ),
    (
        SemanticIntent.OPERATIONAL,
        r"contact|location|hour|schedule|book|appointment",
        r"hours|open|closed|monday|tuesday|call us|email|address|located",
        0.9,
    ),
    (
        SemanticIntent.EDUCATIONAL,
        r"blog|news|article|guide|tip|how-to|resource",
        r"learn|discover|guide|tips|how to|step by step|tutorial",
        0.8,
    ),
    (
        SemanticIntent.LEGAL,
        r"privacy|terms|policy|legal|disclaimer|refund",
        r"privacy policy|terms of service|legal|disclaimer|refund|gdpr|cookie",
        1.0,
    ),
    (
        SemanticIntent.PROMOTIONAL,
        r"offer|deal|sale|promo|special",
        r"limited time|special offer|discount|save|free|bonus|exclusive",
        0.8,
    ),
]


def build_intent_rules(intent_weights: dict[str, float] | None = None) -> list[Rule]:
    """Intent table, with optional per-intent weight overrides from thresholds."""
    intent_weights = intent_weights or {}
    rules = []
    for intent, path_pattern, content_pattern, weight in _INTENT_PATTERNS:
        weight = intent_weights.get(intent.value, weight)
        rules.append(rule(intent.value, path_pattern, weight, RuleScope.PATH))
        rules.append(rule(intent.value, content_pattern, weight, RuleScope.TITLE))
        rules.append(rule(intent.value, content_pattern, weight, RuleScope.BODY))
    return rules


# ─── Tone ───

TONE_RULES = [
    rule(EmotionalTone.LUXURY.value, r"premium|exclusive|bespoke|curated|artisan|handcraft|sophisticated|elegant", scope=RuleScope.COUNT),
    rule(EmotionalTone.AUTHORITATIVE.value, r"expert|certified|licensed|award|recognized|leading|trusted|proven", scope=RuleScope.COUNT),
    rule(EmotionalTone.FRIENDLY.value, r"welcome|family|community|together|love|passion|care|heart|smile", scope=RuleScope.COUNT),
    rule(EmotionalTone.CASUAL.value, r"hey|awesome|cool|great|fun|easy|simple|quick", scope=RuleScope.COUNT),
    rule(EmotionalTone.PROFESSIONAL.value, r"professional|quality|service|solution|efficient|reliable", scope=RuleScope.COUNT),
]


# ─── Key phrases ───

KEY_PHRASE_PATTERNS = [
    re.compile(r'"([^"]{10,100})"'),
    re.compile(r"(?:we (?:are|offer|provide|believe|specialize))[^.!?]{10,80}", re.IGNORECASE),
    re.compile(r"(?:our (?:mission|vision|goal|team|approach))[^.!?]{10,80}", re.IGNORECASE),
    re.compile(r"(?:(?:years|decades) of experience)[^.!?]{0,50}", re.IGNORECASE),
    re.compile(r"(?:award[- ]winning|certified|licensed)[^.!?]{0,50}", re.IGNORECASE),
]


# ─── Hidden gems (OCR text) ───


@dataclass(frozen=True)
class GemRule:
    type: HiddenGemType
    pattern: re.Pattern
    confidence: float
    display_suggestion: str
    min_length: int = 0
    max_length: int = 1000
    use_group: bool = False  # Gem text is capture group 1 instead of the whole match


def _gem(gem_type, pattern, confidence, display, flags=re.IGNORECASE, **limits) -> GemRule:
    return GemRule(gem_type, re.compile(pattern, flags), confidence, display, **limits)


GEM_RULES = [
    _gem(HiddenGemType.FOUNDING_DATE, r"(?:est\.?|established|since|founded)\s*(?:in\s*)?(\d{4})", 0.9, "Badge or Hero subtitle"),
    _gem(HiddenGemType.FOUNDING_DATE, r"(\d{4})\s*-\s*(?:present|today|now)", 0.9, "Badge or Hero subtitle"),
    _gem(HiddenGemType.AWARD, r"(?:winner|awarded|voted|#1|number one|best of|top \d+)[^.!?\n]{5,60}", 0.85, "Trust badge or About section"),
    _gem(HiddenGemType.AWARD, r"(?:award|recognition|honor|accolade)[^.!?\n]{5,60}", 0.85, "Trust badge or About section"),
    _gem(HiddenGemType.CERTIFICATION, r"(?:certified|licensed|accredited|registered)[^.!?\n]{5,60}", 0.9, "Footer or Trust section"),
    _gem(HiddenGemType.CERTIFICATION, r"(?:ISO|OSHA|FDA|BBB|HIPAA)[^.!?\n]{0,40}", 0.9, "Footer or Trust section", flags=0),
    _gem(HiddenGemType.STATISTIC, r"(\d+(?:,\d{3})*\+?)\s*(?:clients|customers|members|projects|years|locations)", 0.8, "Stats counter section"),
    _gem(HiddenGemType.STATISTIC, r"(?:over|more than)\s*(\d+(?:,\d{3})*)\s*(?:satisfied|happy|served)", 0.8, "Stats counter section"),
    _gem(HiddenGemType.LOCATION_DETAIL, r"(?:located in|serving|proudly serving)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)", 0.75, "Hero subtitle or Contact section"),
    _gem(HiddenGemType.LOCATION_DETAIL, rf"\b(?:{'|'.join(constants.LOCATION_GEM_CITIES)})\b[^.!?\n]{{0,30}}", 0.75, "Hero subtitle or Contact section"),
    _gem(HiddenGemType.SLOGAN, r'"([^"]{5,50})"', 0.7, "Hero tagline", flags=0, min_length=6, max_length=59, use_group=True),
    _gem(HiddenGemType.SLOGAN, r"([A-Z][A-Z\s]{10,40}[A-Z])", 0.7, "Hero tagline", flags=0, min_length=6, max_length=59, use_group=True),
]
