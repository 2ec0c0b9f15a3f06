import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from bayevents import config
from bayevents.fetch import fetch_html
from bayevents.pipeline.dedup import dedupe_events
from bayevents.utils.dates import parse_month_day, parse_time
from bayevents.utils.eligibility import AGE_21_PHRASES, EligibilityRules, is_eligible
from bayevents.utils.events import clean_text, make_event, split_venue_comma

SOURCE = "foopee"

RULES = EligibilityRules(reject_phrases=AGE_21_PHRASES)

DATE_HEADER_RE = re.compile(r"^(Mon|Tue|Wed|Thu|Fri|Sat|Sun)\w*\s+(\w+)\s+(\d{1,2})\b", re.IGNORECASE)
WEEK_HEADING_RE = re.compile(r"(\w+)\s+(\d{1,2})\s*-\s*(\w+)\s+(\d{1,2})")


def _own_nodes(item):
    """Children of a list item, minus any nested list (those are visited on their own)."""
    return [
        node for node in item.children
        if not isinstance(node, Comment) and getattr(node, "name", None) not in ("ul", "ol")
    ]


def _own_text(nodes):
    parts = []
    for node in nodes:
        if isinstance(node, NavigableString):
            parts.append(str(node))
        elif isinstance(node, Tag):
            parts.append(node.get_text(" "))
    return clean_text(" ".join(parts))


def _own_links(nodes):
    links = []
    for node in nodes:
        if not isinstance(node, Tag):
            continue
        if node.name == "a" and node.has_attr("href"):
            links.append(node)
        else:
            links.extend(node.find_all("a", href=True))
    return links


def _text_without_links(nodes):
    parts = []
    for node in nodes:
        if isinstance(node, NavigableString):
            parts.append(str(node))
        elif isinstance(node, Tag) and node.name != "a":
            parts.extend(
                str(s) for s in node.find_all(string=True)
                if not isinstance(s, Comment) and s.find_parent("a") is None
            )
    return clean_text(" ".join(parts)).strip(" ,")


def parse_week_anchor(soup, today):
    """Start date of the "Jan 19 - Jan 25" heading, used when no day header precedes a show."""
    heading = soup.find("h2")
    if not heading:
        return None
    match = WEEK_HEADING_RE.search(heading.get_text(" ", strip=True))
    if not match:
        return None
    start_month, start_day = match.group(1), match.group(2)
    return parse_month_day(start_month, start_day, today)


def header_date(text, links, today):
    """Date for a day header like "Tue Jan 20"; None if the item isn't one."""
    if links:
        return None
    match = DATE_HEADER_RE.match(text)
    if not match:
        return None
    return parse_month_day(match.group(2), match.group(3), today)


def scan_items(items, today, anchor_date=None):
    """
    Walk list items in document order carrying the current day.
    A day header replaces the current date; every item with links is a show
    and is yielded as (date, own_nodes, links). Before the first header the
    week anchor is used; with neither, the date is None.
    """
    current_date = None
    for item in items:
        nodes = _own_nodes(item)
        links = _own_links(nodes)
        text = _own_text(nodes)

        date = header_date(text, links, today)
        if date:
            current_date = date
            continue

        if not links:
            continue

        yield current_date or anchor_date, nodes, links


def _parse_show(date, nodes, links):
    full_text = _own_text(nodes)
    if not is_eligible(RULES, text=full_text):
        return None

    venue, city = split_venue_comma(links[0].get_text(" ", strip=True))
    if not venue:
        return None

    bands = [clean_text(link.get_text(" ", strip=True)) for link in links[1:]]
    details = _text_without_links(nodes)

    return make_event(
        date=date,
        time=parse_time(details),
        source=SOURCE,
        title=bands[0] if bands else venue,
        venue=venue,
        city=city,
        details=details,
        bands=bands,
    )


def parse_foopee(html, today):
    """Parse one weekly page of The List (foopee.com)."""
    try:
        soup = BeautifulSoup(html or "", "html.parser")
        anchor_date = parse_week_anchor(soup, today)
        items = soup.select("ul > li")
    except Exception as e:
        print(f"    Foopee: ERROR - {e}")
        return []

    events = []
    for date, nodes, links in scan_items(items, today, anchor_date):
        try:
            event = _parse_show(date, nodes, links)
        except Exception as e:
            print(f"    Foopee: skipped item - {e}")
            continue
        if event:
            events.append(event)

    return dedupe_events(events)


def fetch_foopee(today, weeks=None):
    """Fetch and parse every weekly page; duplicates across pages collapse."""
    weeks = config.FOOPEE_WEEKS if weeks is None else weeks
    events = []
    for week in range(weeks):
        html = fetch_html(config.FOOPEE_URL.format(week))
        if html is None:
            continue
        events.extend(parse_foopee(html, today))
    return dedupe_events(events)
