#!/usr/bin/env python3
"""
Build the Bay Area event listing page from multiple sources.
Currently supports:
- 19hz.info Bay Area listing (table)
- The List / foopee.com (weekly by-date pages)
- Partiful discover (embedded page JSON)
- DICE events API (polled per date window)
- posh.vip explore (headless-rendered page)

Each source is fetched and parsed independently; a failing source is
skipped and the rest of the run continues.
"""

import argparse
import time
import traceback
from datetime import datetime, timezone

from bayevents import config
from bayevents.pipeline.aggregate import aggregate
from bayevents.pipeline.io import (
    events_payload,
    load_existing_status,
    trim_log_by_time,
    write_json,
    write_text,
)
from bayevents.pipeline.metrics import SourceMetrics
from bayevents.pipeline.validate import validate_event
from bayevents.registry import get_scrapers
from bayevents.render import render_html
from bayevents.utils.dates import pacific_today


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Aggregate Bay Area event listings into a static page")
    p.add_argument("--dry-run", action="store_true", help="Print the summary without writing files")
    p.add_argument("--sources", default="", help="Comma-separated subset, e.g. nineteenhz,foopee")
    return p.parse_args(argv)


def run_sources(scrapers, today, log):
    """
    Run every source with the same `today`.
    Returns (events, source_statuses, source_metrics).
    """
    all_events = []
    run_timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    existing_status = load_existing_status()
    source_statuses = {}
    source_metrics = {}

    for name, scraper in scrapers.items():
        log(f"Scraping {name}...")
        metrics = SourceMetrics(name=name)
        start_time = time.time()

        status = {
            "last_run": run_timestamp,
            "success": False,
            "event_count": 0,
            "error": None,
        }

        previous = existing_status.get("sources", {}).get(name, {})
        if previous.get("last_success"):
            status["last_success"] = previous["last_success"]
            status["last_success_count"] = previous.get("last_success_count", 0)

        try:
            events = scraper(today)
            metrics.event_count = len(events)
            log(f"  Found {len(events)} events")
            all_events.extend(events)

            status["success"] = True
            status["event_count"] = len(events)
            status["last_success"] = run_timestamp
            status["last_success_count"] = len(events)
        except Exception as e:
            error_msg = str(e)
            error_trace = traceback.format_exc()
            metrics.errors = 1
            metrics.error_messages.append(error_msg)
            log(f"  ERROR: Failed to scrape {name}: {error_msg}", "ERROR")
            log(f"  Traceback:\n{error_trace}", "ERROR")

            status["error"] = error_msg
            status["error_trace"] = error_trace

        metrics.duration_ms = (time.time() - start_time) * 1000
        status["duration_ms"] = round(metrics.duration_ms)
        source_statuses[name] = status
        source_metrics[name] = metrics

    return all_events, source_statuses, source_metrics


def log_summary(source_metrics, log):
    log("")
    log("=" * 60)
    log("SOURCE SUMMARY")
    log("=" * 60)
    log(f"{'Source':<24} {'Events':>7} {'Errors':>7} {'Time':>10}")
    log("-" * 60)
    for name in sorted(source_metrics.keys()):
        m = source_metrics[name]
        time_str = f"{m.duration_ms:.0f}ms"
        log(f"{name:<24} {m.event_count:>7} {m.errors:>7} {time_str:>10}")
    log("-" * 60)
    total_events = sum(m.event_count for m in source_metrics.values())
    total_errors = sum(m.errors for m in source_metrics.values())
    total_time = sum(m.duration_ms for m in source_metrics.values())
    log(f"{'TOTAL':<24} {total_events:>7} {total_errors:>7} {total_time:.0f}ms")
    log("=" * 60)


def main(argv=None):
    args = parse_args(argv)
    log_lines = []

    def log(message, level="INFO"):
        """Log a message to both console and log buffer."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        print(message)
        log_lines.append(f"[{timestamp}] [{level}] {message}")

    today = pacific_today()
    generated_at = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    log(f"Starting build at {generated_at} (today in Pacific: {today})")

    names = [s.strip() for s in args.sources.split(",") if s.strip()] or None
    scrapers = get_scrapers(names)

    all_events, source_statuses, source_metrics = run_sources(scrapers, today, log)

    valid_events = [e for e in all_events if validate_event(e)]
    invalid_count = len(all_events) - len(valid_events)
    if invalid_count > 0:
        log(f"  Filtered out {invalid_count} invalid events", "WARNING")

    sorted_dates, events_by_date = aggregate(valid_events, today)
    upcoming = sum(len(events_by_date[d]) for d in sorted_dates)
    log_summary(source_metrics, log)
    log(f"\nUpcoming events: {upcoming} across {len(sorted_dates)} dates")

    failed = [name for name, status in source_statuses.items() if not status["success"]]
    if failed:
        log(f"WARNING: Failed to scrape: {', '.join(failed)}", "ERROR")

    if args.dry_run:
        for d in sorted_dates:
            log(f"\n{d}")
            for e in events_by_date[d]:
                where = f" @ {e.venue}" if e.venue else ""
                log(f"  [{e.source}] {e.time or '--'} {e.title}{where}")
        return 0

    write_json(config.EVENTS_PATH, events_payload(today, sorted_dates, events_by_date, generated_at))
    log(f"Events saved to {config.EVENTS_PATH}")

    write_text(config.INDEX_PATH, render_html(sorted_dates, events_by_date, generated_at))
    log(f"Page saved to {config.INDEX_PATH}")

    write_json(config.STATUS_PATH, {
        "last_run": generated_at,
        "today": today,
        "all_success": not failed,
        "any_success": len(failed) < len(source_statuses),
        "total_events": upcoming,
        "sources": source_statuses,
    })
    log(f"Status saved to {config.STATUS_PATH}")

    existing_log = trim_log_by_time(config.LOG_PATH, retention_days=config.LOG_RETENTION_DAYS)
    log(f"Log saved to {config.LOG_PATH}")
    log_content = existing_log + ["\n--- New Run ---\n"] + [line + "\n" for line in log_lines]
    write_text(config.LOG_PATH, "".join(log_content))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
