"""Tests for the DOM entity extractors: team, FAQs, services, contact, navigation."""

import pytest
from conftest import SITE, html_page, make_page

from business_dna.extractors.contact import (
    extract_business_hours,
    extract_certifications,
    extract_contact_info,
    extract_navigation,
    extract_social_links,
    section_anchor,
)
from business_dna.extractors.faqs import extract_faqs, looks_like_question
from business_dna.extractors.services import extract_services, looks_like_service
from business_dna.extractors.team import extract_team_members


@pytest.fixture
def site_pages(small_business_site):
    return [make_page(url, html) for url, html in small_business_site.items()]


def _page(path: str, body: str, **kwargs):
    return make_page(f"{SITE}{path}", html_page(path.strip("/").title(), body, **kwargs))


# ─── Team ─────────────────────────────────────────────────────────────────────


class TestTeamMembers:
    def test_staff_cards(self, site_pages):
        members = extract_team_members(site_pages)

        assert [(m.name, m.role) for m in members] == [
            ("Jane Park", "Head Coach"),
            ("Marcus Lee", "Nutrition Coach"),
        ]
        assert members[0].bio == "Jane has coached for fifteen years."

    def test_card_image_is_absolute(self):
        page = _page(
            "/team",
            '<div class="team"><div class="member"><img src="/img/jane.jpg"><h3>Jane Park</h3>'
            '<p class="role">Head Coach</p></div></div>',
        )
        assert extract_team_members([page])[0].image_url == f"{SITE}/img/jane.jpg"

    def test_card_without_role_is_dropped(self):
        page = _page("/team", '<div class="team"><div class="member"><h3>Jane Park</h3></div></div>')
        assert extract_team_members([page]) == []

    def test_role_and_name_from_paragraph(self):
        """Filler words and role words are never taken for the name."""
        page = _page("/team", "<p>Our Head Coach Jane Park has been helping members get stronger since 2010.</p>")
        [member] = extract_team_members([page])

        assert member.name == "Jane Park"
        assert member.role == "Head Coach"

    def test_heading_with_separator(self):
        page = _page("/staff", "<h2>Marcus Lee - Nutrition Coach</h2>")
        [member] = extract_team_members([page])
        assert (member.name, member.role) == ("Marcus Lee", "Nutrition Coach")

    def test_paragraph_patterns_only_on_team_pages(self):
        page = _page("/blog", "<p>Our Head Coach Jane Park shares five tips for better sleep.</p>")
        assert extract_team_members([page]) == []

    def test_unique_by_name(self):
        card = '<div class="team"><div class="member"><h3>Jane Park</h3><p class="role">Head Coach</p></div></div>'
        pages = [_page("/team", card), _page("/about", card)]
        assert len(extract_team_members(pages)) == 1

    def test_limit(self):
        cards = "".join(
            f'<div class="member"><h3>Coach Number{chr(65 + i)}</h3><p class="role">Trainer</p></div>'
            for i in range(20)
        )
        page = _page("/team", f'<div class="team">{cards}</div>')
        assert len(extract_team_members([page], limit=3)) == 3
        assert len(extract_team_members([page], limit=100)) == 15


# ─── FAQs ─────────────────────────────────────────────────────────────────────


class TestFAQs:
    def test_accordion_details(self):
        page = _page(
            "/",
            '<div class="faq"><details><summary>Do you offer a free trial class?</summary>'
            "<p>Yes, your first group class is always on us.</p></details></div>",
        )
        [faq] = extract_faqs([page])

        assert faq.question == "Do you offer a free trial class?"
        assert faq.answer == "Yes, your first group class is always on us."

    def test_question_headings_on_faq_page(self):
        page = _page(
            "/faq",
            "<h3>How long is a session</h3><p>Most sessions run about fifty minutes including warmup.</p>"
            "<h3>Parking</h3><p>There is free street parking on Larimer.</p>",
        )
        faqs = extract_faqs([page])
        assert [(f.question, f.answer) for f in faqs] == [
            ("How long is a session", "Most sessions run about fifty minutes including warmup."),
        ]

    def test_question_headings_ignored_elsewhere(self):
        page = _page("/about", "<h3>Why did we start?</h3><p>Because Denver needed a friendlier gym.</p>")
        assert extract_faqs([page]) == []

    def test_answer_that_repeats_question_is_rejected(self):
        page = _page(
            "/",
            '<div class="faq"><div class="faq-item"><h4>What should I bring?</h4>'
            '<div class="faq-answer">What should I bring? Water and a towel.</div></div></div>',
        )
        assert extract_faqs([page]) == []

    def test_short_answer_rejected(self):
        page = _page("/", '<div class="faq"><details><summary>Is there parking?</summary><p>Yes.</p></details></div>')
        assert extract_faqs([page]) == []

    def test_duplicate_questions_kept_once(self):
        block = (
            '<div class="faq"><details><summary>Do you offer a free trial class?</summary>'
            "<p>Yes, your first group class is always on us.</p></details></div>"
        )
        assert len(extract_faqs([_page("/", block), _page("/faq", block)])) == 1

    def test_answer_truncated(self):
        page = _page(
            "/",
            '<div class="faq"><details><summary>What is included in a membership?</summary>'
            f"<p>{'Everything you need. ' * 50}</p></details></div>",
        )
        assert len(extract_faqs([page])[0].answer) == 500

    @pytest.mark.parametrize(
        "text,expected",
        [("Do you offer a free trial?", True), ("Why train with us", True), ("Our Story", False)],
    )
    def test_looks_like_question(self, text, expected):
        assert looks_like_question(text) is expected


# ─── Services ─────────────────────────────────────────────────────────────────


class TestServices:
    def test_service_cards(self, site_pages):
        services = extract_services(site_pages)

        assert [s.name for s in services] == ["Personal Training", "Group Yoga"]
        assert services[0].description == "One-on-one coaching tailored to your goals."

    def test_list_items_on_service_page(self):
        page = _page(
            "/services",
            "<h1>What We Offer</h1><ul><li>Massage Therapy: Deep tissue and sports massage</li>"
            "<li>Learn more about our pricing</li></ul>",
        )
        services = extract_services([page])

        assert [s.name for s in services] == ["Massage Therapy"]
        assert services[0].description == "Deep tissue and sports massage"

    def test_card_features(self):
        page = _page(
            "/",
            '<div class="services"><div class="service-card"><h3>Personal Training</h3>'
            "<ul><li>Custom program</li><li>Weekly check-ins</li></ul></div></div>",
        )
        assert extract_services([page])[0].features == ["Custom program", "Weekly check-ins"]

    def test_limit_clamped(self):
        cards = "".join(f'<div class="service-card"><h3>Program {i}</h3></div>' for i in range(30))
        page = _page("/", f'<div class="services">{cards}</div>')
        assert len(extract_services([page], limit=50)) == 20

    @pytest.mark.parametrize("text", ["Our Mission", "Learn More", "Pricing", "Do you offer yoga?", "View All"])
    def test_navigational_wording_rejected(self, text):
        assert not looks_like_service(text)

    @pytest.mark.parametrize("text", ["Personal Training", "Deep Tissue Massage", "Kettlebells"])
    def test_offering_wording_accepted(self, text):
        assert looks_like_service(text)


# ─── Contact, social, navigation ──────────────────────────────────────────────


class TestContact:
    def test_contact_info(self, site_pages):
        contact = extract_contact_info(site_pages)

        assert contact.phone == "(303) 555-0142"
        assert contact.email == "info@peakfitness.com"
        assert contact.address == "1200 Larimer Street, Denver, CO 80204"

    def test_placeholder_email_ignored(self):
        page = _page("/", "<p>Write to name@example.com or coach@peakfitness.com for details.</p>")
        assert extract_contact_info([page]).email == "coach@peakfitness.com"

    def test_org_email_preferred(self):
        page = _page("/", "<p>Jane: jane@peakfitness.com. Front desk: hello@peakfitness.com</p>")
        assert extract_contact_info([page]).email == "hello@peakfitness.com"

    def test_address_pattern_fallback(self):
        page = _page("/", "<p>Visit us at 88 Oak Avenue, Boulder, CO 80302 any weekday.</p>")
        assert extract_contact_info([page]).address.startswith("88 Oak Avenue")

    def test_empty(self):
        page = _page("/", "<p>Nothing to see here at all.</p>")
        assert extract_contact_info([page]).is_empty()

    def test_social_links(self, site_pages):
        social = extract_social_links(site_pages)

        assert social.facebook == "https://www.facebook.com/peakfitnessdenver"
        assert social.instagram == "https://instagram.com/peakfitness"
        assert social.yelp == "https://www.yelp.com/biz/peak-fitness-denver"
        assert social.twitter is None

    def test_share_links_are_not_profiles(self):
        page = _page("/", '<a href="https://www.facebook.com/sharer/sharer.php?u=x">Share</a>')
        assert extract_social_links([page]).facebook is None

    def test_business_hours(self, site_pages):
        assert extract_business_hours(site_pages) == "Monday - Friday 6am - 9pm, Saturday 8am - 2pm"

    def test_no_hours(self):
        assert extract_business_hours([_page("/", "<p>Open by appointment.</p>")]) is None

    def test_certifications_from_footer(self, site_pages):
        assert extract_certifications(site_pages) == [
            "Licensed and insured fitness professionals",
            "BBB Accredited Business",
        ]

    def test_certifications_outside_footer_ignored(self):
        page = _page("/", "<p>Our coaches are certified in CPR.</p>")
        assert extract_certifications([page]) == []


class TestNavigation:
    def test_nav_links_become_section_anchors(self, site_pages):
        nav = extract_navigation(site_pages)

        assert [link.label for link in nav] == ["Home", "About", "Services", "Team", "Contact"]
        assert [link.href for link in nav] == ["#hero", "#about", "#services", "#team", "#contact"]

    def test_external_and_social_links_skipped(self):
        page = _page(
            "/",
            "",
            nav='<a href="/about">About</a><a href="https://other.com/x">Partner</a>'
            '<a href="https://instagram.com/peak">Instagram</a><a href="tel:+13035550142">Call</a>',
        )
        assert [link.label for link in extract_navigation([page])] == ["About"]

    def test_limit(self):
        nav = "".join(f'<a href="/section-{i}">Section {i}</a>' for i in range(10))
        assert len(extract_navigation([_page("/", "", nav=nav)])) == 6

    def test_section_anchor(self):
        assert section_anchor(f"{SITE}/our_team.html") == "#ourteam"
        assert section_anchor(f"{SITE}/services/yoga/") == "#yoga"
