"""
Semantic classifier: intent, tone, key phrases and content priority per page.

Scoring is fully table-driven (see ``rules``); this module only decides
which text each rule scope sees and how scores become labels.
"""

from dataclasses import dataclass, field

from business_dna import constants
from business_dna.config import Thresholds, get_thresholds
from business_dna.extractors.rules import (
    KEY_PHRASE_PATTERNS,
    TONE_RULES,
    Rule,
    RuleScope,
    best_target,
    build_intent_rules,
    score_rules,
)
from business_dna.schemas.page import ContentPriority, EmotionalTone, SemanticIntent, SemanticPage

CRITICAL_INTENTS = {
    SemanticIntent.VISION_MISSION,
    SemanticIntent.SERVICE_OFFERING,
    SemanticIntent.SOCIAL_PROOF,
}
IMPORTANT_INTENTS = {
    SemanticIntent.TEAM_CULTURE,
    SemanticIntent.OPERATIONAL,
    SemanticIntent.VALUE_PROPOSITION,
}


@dataclass(frozen=True)
class Classification:
    intent: SemanticIntent
    confidence: float
    tone: EmotionalTone
    key_phrases: list[str] = field(default_factory=list)
    priority: ContentPriority = ContentPriority.SUPPLEMENTARY


def priority_for(intent: SemanticIntent) -> ContentPriority:
    if intent in CRITICAL_INTENTS:
        return ContentPriority.CRITICAL
    if intent in IMPORTANT_INTENTS:
        return ContentPriority.IMPORTANT
    return ContentPriority.SUPPLEMENTARY


def extract_key_phrases(text: str, limit: int = constants.MAX_KEY_PHRASES) -> list[str]:
    """Quoted text and self-descriptive phrases, de-duplicated in order of discovery."""
    phrases: list[str] = []
    for pattern in KEY_PHRASE_PATTERNS:
        for match in pattern.finditer(text):
            phrase = (match.group(1) if pattern.groups else match.group(0)).strip()
            if phrase and phrase not in phrases:
                phrases.append(phrase)
    return phrases[:limit]


class SemanticClassifier:
    """Classifies SemanticPages with the intent and tone rule tables."""

    def __init__(self, thresholds: Thresholds | None = None, intent_rules: list[Rule] | None = None):
        self.thresholds = thresholds or get_thresholds()
        self.intent_rules = intent_rules or build_intent_rules(self.thresholds.intent_weights)
        self.tone_rules = TONE_RULES

    def classify(self, page: SemanticPage) -> Classification:
        """
        Classify one page.

        Returns:
            Classification; intent is ``unknown`` with confidence 0 when no
            intent scores above zero
        """
        body = page.raw_text.lower()
        intent_scores = score_rules(
            self.intent_rules,
            {
                RuleScope.PATH: page.path.lower(),
                RuleScope.TITLE: page.title.lower(),
                RuleScope.BODY: body,
            },
            self.thresholds,
        )
        best, score = best_target(intent_scores)
        intent = SemanticIntent(best) if best else SemanticIntent.UNKNOWN
        confidence = min(score, 1.0) if best else 0.0

        tone_scores = score_rules(self.tone_rules, {RuleScope.COUNT: body}, self.thresholds)
        # max() keeps the first of equal counts, which is the declared tone order
        tone = EmotionalTone(max(tone_scores, key=tone_scores.get))

        return Classification(
            intent=intent,
            confidence=round(confidence, 4),
            tone=tone,
            key_phrases=extract_key_phrases(page.raw_text),
            priority=priority_for(intent),
        )

    def classify_page(self, page: SemanticPage) -> SemanticPage:
        """Return a classified copy of ``page``."""
        result = self.classify(page)
        return page.model_copy(
            update={
                "semantic_intent": result.intent,
                "intent_confidence": result.confidence,
                "emotional_tone": result.tone,
                "key_phrases": result.key_phrases,
                "content_priority": result.priority,
            }
        )
