import re

from bayevents.models import Event
from bayevents.utils.categories import detect_category

TRAILING_VENUE_RE = re.compile(r"@\s*(.+)$")
TRAILING_CITY_RE = re.compile(r"\s*\(([^)]+)\)\s*$")


def clean_text(text):
    """Collapse runs of whitespace and strip."""
    if not text:
        return ""
    return " ".join(str(text).split())


def split_title_venue(text):
    """
    Split "Event Title @ Venue (City)" into (title, venue).
    Without an "@" the whole text is the title and venue is empty.
    """
    text = clean_text(text)
    match = TRAILING_VENUE_RE.search(text)
    if not match:
        return text, ""
    return text[:match.start()].strip(), match.group(1).strip()


def split_venue_city(venue):
    """Split "Make-Out Room (San Francisco)" into ("Make-Out Room", "San Francisco")."""
    venue = clean_text(venue)
    match = TRAILING_CITY_RE.search(venue)
    if not match:
        return venue, None
    return venue[:match.start()].strip(), match.group(1).strip()


def split_venue_comma(text):
    """Split "Black Cat, S.F." on the last comma into ("Black Cat", "S.F.")."""
    text = clean_text(text)
    if "," not in text:
        return text, None
    venue, city = text.rsplit(",", 1)
    return venue.strip(), city.strip() or None


def make_event(date, source, title=None, time=None, venue=None, city=None,
               details="", bands=(), link=None, source_id=None):
    """
    Build an Event, or return None when the candidate has no date.
    Title falls back to the first performer, then the venue.
    """
    if not date:
        return None

    bands = tuple(b for b in (clean_text(b) for b in bands) if b)
    venue = clean_text(venue) or None
    title = clean_text(title) or (bands[0] if bands else None) or venue
    if not title:
        return None

    details = clean_text(details)
    return Event(
        date=date,
        source=source,
        title=title,
        time=clean_text(time) or None,
        venue=venue,
        city=clean_text(city) or None,
        details=details,
        bands=bands,
        link=link or None,
        category=detect_category(f"{title} {details} {' '.join(bands)}"),
        source_id=str(source_id) if source_id else None,
    )
