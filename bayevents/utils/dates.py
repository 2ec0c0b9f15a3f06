import re
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from dateutil import parser as dtparser

from bayevents import config

PACIFIC = ZoneInfo(config.TIMEZONE)

# A month/day without a year that lands this far behind today belongs to next year.
YEAR_ROLLOVER_DAYS = 180

UNKNOWN_TIME_MINUTES = 24 * 60

MONTH_NAMES = ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]

SLASH_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
MONTH_DAY_RE = re.compile(
    r"\b(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?\s+\d{1,2}(?:st|nd|rd|th)?\b",
    re.IGNORECASE,
)
YEAR_RE = re.compile(r"\b\d{4}\b")

COMPOUND_TIME_RE = re.compile(
    r"\d{1,2}(?::\d{2})?\s*(?:am|pm)"
    r"(?:/\d{1,2}(?::\d{2})?\s*(?:am|pm))?"
    r"(?:\s+til\s+\d{1,2}(?::\d{2})?\s*(?:am|pm))?",
    re.IGNORECASE,
)
SIMPLE_TIME_RE = re.compile(r"\d{1,2}:\d{2}\s*(?:am|pm)?", re.IGNORECASE)
CLOCK_RE = re.compile(r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)?", re.IGNORECASE)


def pacific_today(now=None):
    """
    Return today's date in Pacific time as YYYY-MM-DD.
    Computed once per run and passed down; never call this from an adapter.
    """
    if now is None:
        now = datetime.now(PACIFIC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(PACIFIC).date().isoformat()


def _iso(year, month, day):
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def infer_year(month, day, today):
    """
    Place a year-less month/day relative to today.
    Uses today's year unless that puts the date more than YEAR_ROLLOVER_DAYS
    in the past, in which case the listing is for next year.
    """
    today_date = date.fromisoformat(today)
    for year in (today_date.year, today_date.year + 1):
        try:
            candidate = date(year, month, day)
        except ValueError:
            continue
        if today_date - candidate > timedelta(days=YEAR_ROLLOVER_DAYS):
            continue
        return candidate.isoformat()
    return None


def month_index(month_name):
    """1-based month number from any prefix-matching month name ("Jan", "January", "Sept")."""
    prefix = (month_name or "").strip().lower()[:3]
    if prefix in MONTH_NAMES:
        return MONTH_NAMES.index(prefix) + 1
    return None


def parse_month_day(month_name, day, today):
    month = month_index(month_name)
    if not month:
        return None
    try:
        return infer_year(month, int(day), today)
    except ValueError:
        return None


def parse_date(text, today):
    """
    Normalize "M/D/YYYY" or a free-text "Monday, Jan 20" phrase to YYYY-MM-DD.
    Returns None when neither grammar matches.
    """
    if not text:
        return None
    text = " ".join(text.split())

    if "/" in text:
        match = SLASH_DATE_RE.match(text)
        if not match:
            return None
        month, day, year = (int(g) for g in match.groups())
        return _iso(year, month, day)

    if not MONTH_DAY_RE.search(text):
        return None

    has_year = bool(YEAR_RE.search(text))
    # Leap-year default so "Feb 29" survives until the year is inferred.
    default = datetime(2000, 1, 1)
    try:
        parsed = dtparser.parse(text, default=default, fuzzy=True)
    except (ValueError, OverflowError):
        return None

    if has_year:
        return parsed.date().isoformat()
    return infer_year(parsed.month, parsed.day, today)


def parse_time(text):
    """
    Pull a start time out of free text and return it verbatim.
    Tries the compound form ("6pm/7pm til 9pm") before plain "7:30 pm".
    """
    if not text:
        return None
    match = COMPOUND_TIME_RE.search(text)
    if not match:
        match = SIMPLE_TIME_RE.search(text)
    return match.group(0).strip() if match else None


def datetime_to_pacific(value):
    """
    Parse an ISO datetime string from a JSON feed.
    Returns (YYYY-MM-DD, "7:30 PM") in Pacific time, or (None, None).
    """
    if not value or not isinstance(value, str):
        return None, None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None, None

    if "T" not in value and " " not in value.strip():
        return parsed.date().isoformat(), None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(PACIFIC)
    return parsed.date().isoformat(), format_clock(parsed.hour, parsed.minute)


def format_clock(hours, minutes):
    suffix = "PM" if hours >= 12 else "AM"
    hours = hours % 12 or 12
    return f"{hours}:{minutes:02d} {suffix}"


def time_sort_minutes(time_str):
    """
    Minute-of-day for ordering events within a date.
    Compound tokens sort by their first (door/start) time. Missing or
    unparseable times sort after everything else.
    """
    if not time_str:
        return UNKNOWN_TIME_MINUTES

    clocks = list(CLOCK_RE.finditer(time_str))
    if not any(m.group(2) is not None or m.group(3) is not None for m in clocks):
        return UNKNOWN_TIME_MINUTES

    first = clocks[0]
    hours = int(first.group(1))
    minutes = int(first.group(2) or 0)
    if hours > 23 or minutes > 59:
        return UNKNOWN_TIME_MINUTES

    meridiem = first.group(3)
    if meridiem is None:
        # "7/8pm": borrow the marker from a later time in the same token
        meridiem = next((m.group(3) for m in clocks[1:] if m.group(3)), None)

    if meridiem:
        meridiem = meridiem.lower()
        if hours > 12:
            return UNKNOWN_TIME_MINUTES
        if meridiem == "pm" and hours < 12:
            hours += 12
        elif meridiem == "am" and hours == 12:
            hours = 0
    elif 1 <= hours <= 11:
        # Bare "8:00" on a nightlife listing is an evening time
        hours += 12

    return hours * 60 + minutes
