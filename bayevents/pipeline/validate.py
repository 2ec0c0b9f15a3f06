from datetime import date

from bayevents import config


def validate_event(event):
    """Check that event has all required fields with valid data."""
    for field in config.REQUIRED_FIELDS:
        if not getattr(event, field, None):
            return False
    try:
        parsed = date.fromisoformat(event.date)
    except (TypeError, ValueError):
        return False
    return parsed.isoformat() == event.date
