import json

from bs4 import BeautifulSoup

from bayevents import config
from bayevents.fetch import fetch_html
from bayevents.pipeline.dedup import dedupe_events, dedupe_records
from bayevents.utils.dates import datetime_to_pacific
from bayevents.utils.eligibility import AGE_21_PHRASES, BAY_AREA_CITIES, EligibilityRules, is_eligible
from bayevents.utils.events import clean_text, make_event

SOURCE = "partiful"
PARTIFUL_BASE = "https://partiful.com"

RULES = EligibilityRules(
    reject_phrases=AGE_21_PHRASES,
    allowed_cities=BAY_AREA_CITIES,
    require_city=True,
)

DESCRIPTION_LIMIT = 280


def extract_next_data(html):
    """Return the page's __NEXT_DATA__ hydration payload, or None."""
    soup = BeautifulSoup(html or "", "html.parser")
    script = soup.find("script", id="__NEXT_DATA__")
    if not script or not script.string:
        return None
    try:
        return json.loads(script.string)
    except ValueError:
        return None


def _unwrap(record):
    # Section entries are sometimes {"event": {...}} instead of the bare record
    if isinstance(record, dict) and isinstance(record.get("event"), dict):
        return record["event"]
    return record


def collect_records(data):
    """
    Gather event records from the flat feed and from every categorized
    section, then drop repeats by id. An event featured in a section is also
    in the feed, so the same id commonly appears twice.
    """
    page_props = (data or {}).get("props", {}).get("pageProps", {})
    records = list(page_props.get("feed") or [])
    for section in page_props.get("sections") or []:
        if isinstance(section, dict):
            records.extend(section.get("events") or [])

    records = [_unwrap(r) for r in records]
    records = [r for r in records if isinstance(r, dict)]
    return dedupe_records(records, lambda r: r.get("id"))


def _record_to_event(record, today):
    location = record.get("location") or {}
    if not isinstance(location, dict):
        location = {"name": str(location)}
    venue = location.get("name")
    city = location.get("city")

    description = clean_text(record.get("description"))
    if not is_eligible(RULES, text=f"{record.get('title', '')} {description}", city=city):
        return None

    date, time = datetime_to_pacific(record.get("startDate"))
    if not date or date < today:
        return None

    link = record.get("url")
    if not link and record.get("id"):
        link = f"{PARTIFUL_BASE}/e/{record['id']}"
    elif link and link.startswith("/"):
        link = PARTIFUL_BASE + link

    if len(description) > DESCRIPTION_LIMIT:
        description = description[:DESCRIPTION_LIMIT].rsplit(" ", 1)[0] + "…"

    return make_event(
        date=date,
        time=time,
        source=SOURCE,
        title=record.get("title"),
        venue=venue,
        city=city,
        details=description,
        link=link,
        source_id=record.get("id"),
    )


def parse_partiful(html, today):
    """Parse the partiful discover page's embedded hydration JSON."""
    try:
        data = extract_next_data(html)
        if data is None:
            print("    Partiful: no __NEXT_DATA__ payload found")
            return []
        records = collect_records(data)
    except Exception as e:
        print(f"    Partiful: ERROR - {e}")
        return []

    events = []
    for record in records:
        try:
            event = _record_to_event(record, today)
        except Exception as e:
            print(f"    Partiful: skipped record {record.get('id')} - {e}")
            continue
        if event:
            events.append(event)

    return dedupe_events(events)


def fetch_partiful(today):
    html = fetch_html(config.PARTIFUL_URL)
    if html is None:
        return []
    return parse_partiful(html, today)
