import re

from bs4 import BeautifulSoup

from bayevents import config
from bayevents.fetch import fetch_html
from bayevents.pipeline.dedup import dedupe_events
from bayevents.utils.dates import parse_date
from bayevents.utils.eligibility import EligibilityRules, is_eligible
from bayevents.utils.events import clean_text, make_event, split_title_venue, split_venue_city

SOURCE = "nineteenhz"

RULES = EligibilityRules(
    reject_phrases=("21+", "+ 21"),
    denied_cities=frozenset({"Sacramento"}),
)

DATE_PATTERN = r"(\d{1,2}/\d{1,2}/\d{4}|\w+day,?\s+\w+\s+\d{1,2})"
TIME_PATTERN = r"(\d{1,2}:\d{2}\s*(?:am|pm)?)"
DATE_TIME_RE = re.compile(DATE_PATTERN + r"[\s,]+" + TIME_PATTERN, re.IGNORECASE)
DATE_ONLY_RE = re.compile(DATE_PATTERN, re.IGNORECASE)
TIME_ONLY_RE = re.compile(TIME_PATTERN, re.IGNORECASE)


def parse_date_time_cell(text, today):
    """
    Read (date, time) from the first cell.
    The combined date+time match is tried first, then date and time separately.
    """
    text = clean_text(text)
    match = DATE_TIME_RE.search(text)
    if match:
        return parse_date(match.group(1), today), match.group(2).strip()

    date_match = DATE_ONLY_RE.search(text)
    if not date_match:
        return None, None
    time_match = TIME_ONLY_RE.search(text)
    return parse_date(date_match.group(1), today), time_match.group(1).strip() if time_match else None


def _parse_row(cells, today):
    texts = [clean_text(c.get_text(" ", strip=True)) for c in cells]
    texts += [""] * (6 - len(texts))
    date_time, title_venue, tags, price_age, organizers = texts[:5]

    title, venue = split_title_venue(title_venue)
    venue, city = split_venue_city(venue)
    # Rows without "@ venue" can still carry the city suffix on the title
    _, title_city = split_venue_city(title)

    if not is_eligible(RULES, text=price_age, city=city or title_city):
        return None

    date, time = parse_date_time_cell(date_time, today)
    if not date:
        return None

    link = None
    if len(cells) > 5:
        anchor = cells[5].find("a", href=True)
        link = anchor["href"] if anchor else None

    details = price_age + (f" | {tags}" if tags else "")
    if organizers.strip("—-– "):
        details += f" | by {organizers}"

    return make_event(
        date=date,
        time=time,
        source=SOURCE,
        title=title,
        venue=venue,
        city=city,
        details=details,
        link=link,
    )


def parse_nineteenhz(html, today):
    """
    Parse the 19hz Bay Area listing table.
    Cells per row: date/time, "Title @ Venue (City)", tags, price/age,
    organizers, links.
    """
    try:
        soup = BeautifulSoup(html or "", "html.parser")
        rows = soup.select("table tr")
    except Exception as e:
        print(f"    19hz: ERROR - {e}")
        return []

    events = []
    for row in rows:
        cells = row.find_all("td", recursive=False)
        if len(cells) < 4:
            continue
        try:
            event = _parse_row(cells, today)
        except Exception as e:
            print(f"    19hz: skipped row - {e}")
            continue
        if event:
            events.append(event)

    return dedupe_events(events)


def fetch_nineteenhz(today):
    html = fetch_html(config.NINETEENHZ_URL)
    if html is None:
        return []
    return parse_nineteenhz(html, today)
