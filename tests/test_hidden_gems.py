"""Tests for hidden-gem mining over OCR text."""

from business_dna.extractors.hidden_gems import (
    extract_hidden_gems,
    extract_hidden_gems_from_images,
    merge_hidden_gems,
)
from business_dna.schemas.entities import HiddenGemType

BADGE = "https://peakfitness.com/images/badge.png"
BANNER = "https://peakfitness.com/images/banner.jpg"


class TestExtractHiddenGems:
    def test_founding_date(self):
        [gem] = extract_hidden_gems("Established 1998", BADGE)

        assert gem.type == HiddenGemType.FOUNDING_DATE
        assert gem.text == "Established 1998"
        assert gem.source == BADGE
        assert gem.confidence == 0.9
        assert gem.display_suggestion

    def test_year_to_present(self):
        [gem] = extract_hidden_gems("2004 - present", BADGE)
        assert gem.type == HiddenGemType.FOUNDING_DATE
        assert gem.text == "2004 - present"

    def test_award(self):
        [gem] = extract_hidden_gems("Voted Best Gym in Denver 2023", BADGE)
        assert gem.type == HiddenGemType.AWARD
        assert gem.text == "Voted Best Gym in Denver 2023"

    def test_statistic(self):
        [gem] = extract_hidden_gems("500+ members", BANNER)
        assert gem.type == HiddenGemType.STATISTIC
        assert gem.confidence == 0.8

    def test_quoted_slogan_uses_inner_text(self):
        [gem] = extract_hidden_gems('"Stronger every day"', BANNER)
        assert gem.type == HiddenGemType.SLOGAN
        assert gem.text == "Stronger every day"

    def test_named_city(self):
        [gem] = extract_hidden_gems("Downtown Chicago studio", BANNER)
        assert gem.type == HiddenGemType.LOCATION_DETAIL
        assert gem.text == "Chicago studio"
        assert gem.confidence == 0.75

    def test_city_abbreviation_needs_word_boundary(self):
        assert extract_hidden_gems("Classes for all levels", BANNER) == []

    def test_acronym_certification_is_case_sensitive(self):
        assert extract_hidden_gems("BBB A+ rating", BADGE)[0].type == HiddenGemType.CERTIFICATION
        assert extract_hidden_gems("bbb", BADGE) == []

    def test_results_follow_rule_order(self):
        gems = extract_hidden_gems("Licensed and insured since 2005", BADGE)
        assert [g.type for g in gems] == [HiddenGemType.FOUNDING_DATE, HiddenGemType.CERTIFICATION]

    def test_empty_text(self):
        assert extract_hidden_gems("", BADGE) == []

    def test_capped(self):
        text = "\n".join(f"Established {1900 + i}" for i in range(20))
        assert len(extract_hidden_gems(text, BADGE)) == 15


class TestMerge:
    def test_first_occurrence_wins_across_images(self):
        gems = extract_hidden_gems_from_images([(BADGE, "Established 1998"), (BANNER, "ESTABLISHED 1998")])

        assert len(gems) == 1
        assert gems[0].source == BADGE

    def test_image_order_is_kept(self):
        gems = extract_hidden_gems_from_images([(BANNER, "500+ members"), (BADGE, "Established 1998")])
        assert [g.source for g in gems] == [BANNER, BADGE]

    def test_merge_limit(self):
        groups = [extract_hidden_gems(f"Established {1900 + i}", BADGE) for i in range(10)]
        assert len(merge_hidden_gems(groups, limit=4)) == 4
