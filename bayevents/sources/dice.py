from bayevents import config
from bayevents.fetch import fetch_json
from bayevents.pipeline.dedup import dedupe_events, dedupe_records
from bayevents.utils.dates import datetime_to_pacific
from bayevents.utils.eligibility import AGE_21_PHRASES, BAY_AREA_CITIES, EligibilityRules, is_eligible
from bayevents.utils.events import clean_text, make_event

SOURCE = "dice"

RULES = EligibilityRules(
    reject_phrases=AGE_21_PHRASES,
    allowed_cities=BAY_AREA_CITIES,
    require_city=True,
)


def _records(payload):
    if isinstance(payload, dict):
        records = payload.get("data") or payload.get("events") or []
    elif isinstance(payload, list):
        records = payload
    else:
        records = []
    return [r for r in records if isinstance(r, dict)]


def merge_windows(payloads):
    """
    Concatenate the per-window responses and keep the first copy of each
    provider id. "this_week" and "this_month" always overlap.
    """
    records = []
    for payload in payloads:
        records.extend(_records(payload))
    return dedupe_records(records, lambda r: r.get("id"))


def _record_to_event(record, today):
    venue = record.get("venue") or {}
    if not isinstance(venue, dict):
        venue = {"name": str(venue)}

    age_limit = clean_text(record.get("age_limit"))
    description = clean_text(record.get("description"))
    if not is_eligible(RULES, text=f"{age_limit} {description}", city=venue.get("city")):
        return None

    date, time = datetime_to_pacific(record.get("date"))
    if not date or date < today:
        return None

    lineup = [
        a.get("name") if isinstance(a, dict) else a
        for a in record.get("lineup") or []
    ]

    details = " | ".join(p for p in (clean_text(record.get("price")), age_limit) if p)

    return make_event(
        date=date,
        time=time,
        source=SOURCE,
        title=record.get("name"),
        venue=venue.get("name"),
        city=venue.get("city"),
        details=details,
        bands=[n for n in lineup if n],
        link=record.get("url"),
        source_id=record.get("id"),
    )


def parse_dice(payloads, today):
    """Convert the merged API responses into events."""
    try:
        records = merge_windows(payloads)
    except Exception as e:
        print(f"    DICE: ERROR - {e}")
        return []

    events = []
    for record in records:
        try:
            event = _record_to_event(record, today)
        except Exception as e:
            print(f"    DICE: skipped record {record.get('id')} - {e}")
            continue
        if event:
            events.append(event)

    return dedupe_events(events)


def fetch_dice(today):
    """Poll the events API once per date window; failed windows are skipped."""
    payloads = []
    for window in config.DICE_DATE_WINDOWS:
        params = {"city": config.DICE_CITY, "date_window": window}
        payload = fetch_json(config.DICE_API_URL, params=params)
        if payload is not None:
            payloads.append(payload)
    return parse_dice(payloads, today)
