"""Team member extraction: staff cards first, then name/role patterns on team pages."""

import re
from typing import Iterable

from business_dna import constants
from business_dna.extractors.dom import first_text, image_url, soup_for, text_of
from business_dna.schemas.entities import ExtractedTeamMember
from business_dna.schemas.page import SemanticIntent, SemanticPage

CARD_SELECTORS = [
    '[class*="team"] [class*="member"]',
    '[class*="team"] [class*="card"]',
    '[class*="staff"]',
    '[class*="trainer"]',
    '[class*="coach"]',
    ".team-member",
    ".staff-member",
    '[itemtype*="Person"]',
]

NAME_SELECTOR = 'h3, h4, .name, [class*="name"], [itemprop="name"]'
ROLE_SELECTOR = '.role, .title, .position, [class*="role"], [class*="title"], [itemprop="jobTitle"]'
BIO_SELECTOR = "p, .bio, .description"

HEADING_RE = re.compile(r"^([A-Z][a-z]+ [A-Z][a-z]+)\s*[-–—|,]\s*(.+)$")
ROLE_WORDS_RE = re.compile(
    r"\b(CEO|Founder|Co-Founder|Owner|Director|Manager|Head Coach|Coach|Trainer|Therapist|Doctor|Dr\.)",
    re.IGNORECASE,
)
# Lookahead so overlapping pairs are all tried: "Coach Jane" and "Jane Park"
PERSON_RE = re.compile(r"(?=\b([A-Z][a-z]+ [A-Z][a-z]+)\b)")
NOT_NAME_WORDS = {
    "our", "the", "meet", "head", "lead", "senior", "personal",
    "certified", "with", "and", "we", "at", "in", "team", "staff",
}

MIN_NAME_CHARS = 3
MAX_NAME_CHARS = 60
MAX_ROLE_CHARS = 100


def _person_name(text: str) -> str | None:
    """First capitalized word pair that is not a role or filler such as 'Our Head'."""
    for match in PERSON_RE.finditer(text):
        candidate = match.group(1)
        words = candidate.lower().split()
        if any(w in NOT_NAME_WORDS for w in words) or ROLE_WORDS_RE.search(candidate):
            continue
        return candidate
    return None


def _bio(card, name: str, role: str) -> str:
    """First text block that is neither the name nor the role."""
    for el in card.select(BIO_SELECTOR):
        text = text_of(el)
        if text and text not in (name, role):
            return text
    return ""


def _is_team_page(page: SemanticPage) -> bool:
    path = page.path.lower()
    return page.semantic_intent == SemanticIntent.TEAM_CULTURE or "team" in path or "staff" in path


class _Roster:
    def __init__(self, limit: int):
        self.limit = limit
        self.members: list[ExtractedTeamMember] = []
        self._seen: set[str] = set()

    @property
    def full(self) -> bool:
        return len(self.members) >= self.limit

    def add(self, name: str, role: str, bio: str = "", image: str | None = None):
        name, role = name.strip(), role.strip()
        if self.full or not (MIN_NAME_CHARS <= len(name) <= MAX_NAME_CHARS):
            return
        if not role or len(role) > MAX_ROLE_CHARS or role.lower() == name.lower():
            return
        if name.lower() in self._seen:
            return
        self._seen.add(name.lower())
        self.members.append(ExtractedTeamMember(name=name, role=role, bio=bio.strip(), image_url=image))


def extract_team_members(pages: Iterable[SemanticPage], limit: int = constants.MAX_TEAM_MEMBERS) -> list[ExtractedTeamMember]:
    """
    Extract team members; every entry has both a name and a role.

    Args:
        pages: Crawled pages
        limit: Result cap, clamped to 1..15

    Returns:
        Members unique by lower-cased name
    """
    roster = _Roster(max(1, min(limit, constants.MAX_TEAM_MEMBERS_LIMIT)))
    pages = list(pages)

    for page in pages:
        soup = soup_for(page)
        if soup is None:
            continue
        for selector in CARD_SELECTORS:
            for card in soup.select(selector):
                if roster.full:
                    return roster.members
                name = first_text(card, NAME_SELECTOR)
                role = first_text(card, ROLE_SELECTOR)
                roster.add(name, role, _bio(card, name, role), image_url(card, page.url))

    for page in filter(_is_team_page, pages):
        for heading in page.headings:
            match = HEADING_RE.match(heading)
            if match:
                roster.add(match.group(1), match.group(2))

        for paragraph in page.paragraphs:
            role = ROLE_WORDS_RE.search(paragraph)
            name = _person_name(paragraph)
            if role and name:
                roster.add(name, role.group(1), bio=paragraph)

    return roster.members
