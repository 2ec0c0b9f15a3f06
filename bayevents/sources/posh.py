import re
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from bayevents import config
from bayevents.fetch import render_page
from bayevents.pipeline.dedup import dedupe_events
from bayevents.utils.dates import MONTH_DAY_RE, datetime_to_pacific, parse_date, parse_time
from bayevents.utils.eligibility import AGE_21_PHRASES, EligibilityRules, is_eligible
from bayevents.utils.events import clean_text, make_event

SOURCE = "poshvip"
POSH_BASE = "https://posh.vip"

RULES = EligibilityRules(reject_phrases=AGE_21_PHRASES)

# Tried in order; the first selector that matches anything wins.
CARD_SELECTORS = [
    "[data-testid*='event-card'], [data-testid*='eventCard']",
    "a[href*='/e/']",
    "[class*='EventCard'], [class*='event-card'], [class*='eventCard']",
]
TITLE_SELECTOR = (
    "[data-testid*='title'], [data-testid*='name'], h1, h2, h3, h4, "
    "[class*='title'], [class*='Title'], [class*='name'], [class*='Name']"
)
DATE_SELECTOR = "[data-testid*='date'], [class*='date'], [class*='Date'], time"
VENUE_SELECTOR = (
    "[data-testid*='venue'], [data-testid*='location'], "
    "[class*='venue'], [class*='Venue'], [class*='location'], [class*='Location']"
)
DATE_PHRASE_RE = re.compile(
    r"(?:(?:mon|tue|wed|thu|fri|sat|sun)[a-z]*,?\s+)?" + MONTH_DAY_RE.pattern,
    re.IGNORECASE,
)


def find_cards(soup):
    for selector in CARD_SELECTORS:
        cards = soup.select(selector)
        if cards:
            # Substring matches also hit parts of a card ("event-card-title"); keep the outermost
            matched = {id(card) for card in cards}
            return [card for card in cards if not any(id(p) in matched for p in card.parents)]
    return []


def _first_text(card, selector):
    el = card.select_one(selector)
    return clean_text(el.get_text(" ", strip=True)) if el else ""


def _card_link(card):
    anchor = card if card.name == "a" and card.has_attr("href") else card.find("a", href=True)
    if not anchor:
        return None
    return urljoin(POSH_BASE, anchor["href"])


def _card_date(card, full_text, today):
    time_el = card.find("time", attrs={"datetime": True})
    if time_el:
        date, time = datetime_to_pacific(time_el["datetime"])
        if date:
            return date, time or parse_time(time_el.get_text(" ", strip=True))

    date_text = _first_text(card, DATE_SELECTOR)
    date = None
    for text in (date_text, full_text):
        match = DATE_PHRASE_RE.search(text)
        if match:
            date = parse_date(match.group(0), today)
        elif "/" in text:
            date = parse_date(text, today)
        if date:
            break
    return date, parse_time(date_text) or parse_time(full_text)


def _parse_card(card, today):
    full_text = clean_text(card.get_text(" ", strip=True))
    if not full_text or not is_eligible(RULES, text=full_text):
        return None

    title = _first_text(card, TITLE_SELECTOR)
    if not title:
        lines = [clean_text(s) for s in card.get_text("\n").split("\n")]
        title = next((line for line in lines if line), "")

    date, time = _card_date(card, full_text, today)
    if not date or date < today:
        return None

    link = _card_link(card)
    slug = None
    if link and "/e/" in link:
        slug = urlparse(link).path.rstrip("/").rsplit("/", 1)[-1] or None

    return make_event(
        date=date,
        time=time,
        source=SOURCE,
        title=title,
        venue=_first_text(card, VENUE_SELECTOR),
        link=link,
        source_id=slug,
    )


def parse_posh(html, today):
    """Parse a rendered posh.vip explore page."""
    try:
        soup = BeautifulSoup(html or "", "html.parser")
        cards = find_cards(soup)
    except Exception as e:
        print(f"    Posh: ERROR - {e}")
        return []

    events = []
    for card in cards:
        try:
            event = _parse_card(card, today)
        except Exception as e:
            print(f"    Posh: skipped card - {e}")
            continue
        if event:
            events.append(event)

    return dedupe_events(events)


def fetch_posh(today, render=render_page):
    """
    Render the explore page and parse it.
    `render` is any callable url -> html-or-None; tests pass a canned one.
    """
    html = render(config.POSH_EXPLORE_URL)
    if html is None:
        return []
    return parse_posh(html, today)
