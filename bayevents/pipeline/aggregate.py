from bayevents.utils.dates import time_sort_minutes


def group_by_date(events):
    """Map date -> events, keeping emission order within each date."""
    events_by_date = {}
    for event in events:
        events_by_date.setdefault(event.date, []).append(event)
    return events_by_date


def aggregate(events, today):
    """
    Group events by date, drop dates before today, and order everything.
    Dates sort as YYYY-MM-DD strings; events within a date sort by start
    minute with unknown times last. The sort is stable, so ties keep
    emission order.
    Returns (sorted_dates, events_by_date).
    """
    grouped = group_by_date(events)
    sorted_dates = sorted(d for d in grouped if d >= today)
    events_by_date = {
        d: sorted(grouped[d], key=lambda e: time_sort_minutes(e.time))
        for d in sorted_dates
    }
    return sorted_dates, events_by_date


def flatten(sorted_dates, events_by_date):
    return [event for d in sorted_dates for event in events_by_date[d]]
