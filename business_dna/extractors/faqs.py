"""FAQ extraction: accordion markup first, then question headings on FAQ pages."""

import re
from typing import Iterable, Optional

from bs4 import Tag

from business_dna import constants
from business_dna.extractors.dom import soup_for, text_of
from business_dna.schemas.entities import ExtractedFAQ
from business_dna.schemas.page import SemanticPage

CONTAINER_SELECTOR = '[class*="faq"], #faq, .accordion, [itemtype*="FAQPage"]'
ITEM_SELECTOR = 'details, .accordion-item, [class*="item"], [itemtype*="Question"]'
QUESTION_SELECTOR = 'summary, .question, h3, h4, [class*="question"], [itemprop="name"]'
ANSWER_SELECTOR = '.answer, [class*="answer"], [itemprop="acceptedAnswer"], p, .content'

QUESTION_START_RE = re.compile(r"^(what|how|why)\b", re.IGNORECASE)

MIN_QUESTION_CHARS = 11
MIN_ANSWER_CHARS = 21


def looks_like_question(text: str) -> bool:
    """
    Examples:
        >>> looks_like_question("Do you offer a free trial?")
        True
        >>> looks_like_question("How long is a session")
        True
        >>> looks_like_question("Our Story")
        False
    """
    return "?" in text or bool(QUESTION_START_RE.match(text.strip()))


def _related(a: Tag, b: Tag) -> bool:
    """True when a and b are the same element or one contains the other."""
    return a is b or any(p is a for p in b.parents) or any(p is b for p in a.parents)


def _is_faq_page(page: SemanticPage) -> bool:
    return "faq" in page.path.lower() or "frequently asked" in page.raw_text.lower()


def _adjacent_answer(heading: Tag) -> str:
    """Text of the block right after a question heading, stopping at the next heading."""
    for sibling in heading.find_next_siblings():
        if sibling.name in ("h1", "h2", "h3", "h4", "h5", "h6"):
            return ""
        text = text_of(sibling)
        if text:
            return text
    return ""


class _FAQList:
    def __init__(self, limit: int):
        self.limit = limit
        self.items: list[ExtractedFAQ] = []
        self._seen: set[str] = set()

    @property
    def full(self) -> bool:
        return len(self.items) >= self.limit

    def add(self, question: str, answer: Optional[str]):
        question = " ".join(question.split())
        answer = " ".join((answer or "").split())
        if self.full or len(question) < MIN_QUESTION_CHARS or len(answer) < MIN_ANSWER_CHARS:
            return
        if not looks_like_question(question) or answer.lower().startswith(question.lower()):
            return
        key = question.lower()
        if key in self._seen:
            return
        self._seen.add(key)
        self.items.append(ExtractedFAQ(question=question, answer=answer[: constants.MAX_FAQ_ANSWER_CHARS]))


def extract_faqs(pages: Iterable[SemanticPage], limit: int = constants.MAX_FAQS) -> list[ExtractedFAQ]:
    """
    Extract question/answer pairs.

    Returns:
        FAQs unique by lower-cased question, answers truncated to 500 chars
    """
    faqs = _FAQList(max(1, min(limit, constants.MAX_FAQS)))
    pages = list(pages)

    for page in pages:
        soup = soup_for(page)
        if soup is None:
            continue

        for container in soup.select(CONTAINER_SELECTOR):
            for item in container.select(ITEM_SELECTOR):
                if faqs.full:
                    return faqs.items
                question_el = item.select_one(QUESTION_SELECTOR)
                if question_el is None:
                    continue
                answer_el = next(
                    (el for el in item.select(ANSWER_SELECTOR) if not _related(el, question_el)),
                    None,
                )
                faqs.add(text_of(question_el), text_of(answer_el))

        if _is_faq_page(page):
            for heading in soup.find_all(["h2", "h3", "h4", "h5"]):
                if faqs.full:
                    return faqs.items
                question = text_of(heading)
                if looks_like_question(question):
                    faqs.add(question, _adjacent_answer(heading))

    # Pages kept without a DOM snapshot: pair question headings with paragraphs by position
    for page in pages:
        if page.html or not _is_faq_page(page):
            continue
        for i, heading in enumerate(page.headings):
            if looks_like_question(heading) and i < len(page.paragraphs):
                faqs.add(heading, page.paragraphs[i])

    return faqs.items
