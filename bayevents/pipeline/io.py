import json
import re
from datetime import datetime, timedelta, timezone

from bayevents import config


def trim_log_by_time(log_path, retention_days=14, now=None):
    """
    Remove log entries older than retention_days.
    Returns list of lines to keep.
    """
    if not log_path.exists():
        return []

    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=retention_days)
    cutoff_str = cutoff.strftime("%Y-%m-%d %H:%M:%S")

    kept_lines = []
    current_entry_recent = False

    with open(log_path, "r", encoding="utf-8") as f:
        for line in f:
            match = re.match(r"\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\]", line)
            if match:
                current_entry_recent = match.group(1) >= cutoff_str

            if current_entry_recent:
                kept_lines.append(line)

    return kept_lines


def load_existing_status():
    """Load the previous run's status file if available."""
    try:
        if config.STATUS_PATH.exists():
            with open(config.STATUS_PATH, "r") as f:
                return json.load(f)
    except (OSError, ValueError):
        pass
    return {"sources": {}}


def events_payload(today, sorted_dates, events_by_date, generated_at):
    return {
        "today": today,
        "generated_at": generated_at,
        "dates": list(sorted_dates),
        "events_by_date": {
            d: [event.to_dict() for event in events_by_date[d]]
            for d in sorted_dates
        },
    }


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def write_text(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
