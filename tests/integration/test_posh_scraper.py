from pathlib import Path

from bayevents import config
from bayevents.sources.posh import fetch_posh, parse_posh

FIXTURE = Path("tests/fixtures/posh_rendered.html")
FALLBACK_FIXTURE = Path("tests/fixtures/posh_fallback.html")


def test_parse_posh_rendered_page():
    events = parse_posh(FIXTURE.read_text(), "2026-01-19")

    assert [e.title for e in events] == ["Neon Nights", "Friday Social"]

    neon = events[0]
    assert neon.date == "2026-01-24"
    assert neon.time == "10:00 PM"
    assert neon.venue == "The Great Northern"
    assert neon.link == "https://posh.vip/e/neon-nights"
    assert neon.source == "poshvip"

    social = events[1]
    assert social.date == "2026-01-30"
    assert social.time == "9:00 PM"
    assert social.venue == "Public Works"
    assert social.link == "https://posh.vip/e/friday-social"


def test_parse_posh_falls_back_to_event_links():
    events = parse_posh(FALLBACK_FIXTURE.read_text(), "2026-01-19")

    assert len(events) == 1
    event = events[0]
    assert event.title == "Deep House Brunch"
    assert event.date == "2026-01-25"
    assert event.time == "1:00 PM"
    assert event.venue == "Madrone Art Bar"
    assert event.category == "electronic"


def test_parse_posh_no_cards():
    assert parse_posh("<html><body><p>Loading...</p></body></html>", "2026-01-19") == []


def test_fetch_posh_with_canned_renderer():
    requested = []

    def render(url):
        requested.append(url)
        return FIXTURE.read_text()

    events = fetch_posh("2026-01-19", render=render)

    assert requested == [config.POSH_EXPLORE_URL]
    assert len(events) == 2


def test_fetch_posh_render_failure():
    assert fetch_posh("2026-01-19", render=lambda url: None) == []


def test_parse_posh_ignores_nested_card_parts():
    html = (
        '<div data-testid="event-card"><a href="/e/x">'
        '<h3 data-testid="event-card-title">Neon</h3>'
        '<div data-testid="event-card-date">Sat, Jan 24 10:00 PM</div>'
        "</a></div>"
    )
    events = parse_posh(html, "2026-01-19")

    assert [(e.title, e.date, e.link) for e in events] == [("Neon", "2026-01-24", "https://posh.vip/e/x")]


def test_parse_posh_fixture_cards_all_have_links():
    events = parse_posh(FIXTURE.read_text(), "2026-01-19")
    assert all(e.link and e.source_id for e in events)
