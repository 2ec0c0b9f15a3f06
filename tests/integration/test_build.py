import json

import pytest
from freezegun import freeze_time

import scrape
from bayevents import config
from bayevents.models import Event


def ev(date, title, source, time=None):
    return Event(date=date, source=source, title=title, time=time, venue="Club")


@pytest.fixture
def output_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "EVENTS_PATH", tmp_path / "events.json")
    monkeypatch.setattr(config, "INDEX_PATH", tmp_path / "index.html")
    monkeypatch.setattr(config, "STATUS_PATH", tmp_path / "scrape-status.json")
    monkeypatch.setattr(config, "LOG_PATH", tmp_path / "scrape-log.txt")
    return tmp_path


@pytest.fixture
def scrapers(monkeypatch):
    seen_today = []

    def good(today):
        seen_today.append(today)
        return [
            ev("2026-01-20", "Late Show", "nineteenhz", "10:00 pm"),
            ev("2026-01-20", "Early Show", "nineteenhz", "7:00 pm"),
            ev("2026-01-18", "Already Happened", "nineteenhz"),
            ev("not-a-date", "Broken", "nineteenhz"),
        ]

    def other(today):
        seen_today.append(today)
        return [ev("2026-01-19", "Tonight", "foopee")]

    def broken(today):
        seen_today.append(today)
        raise RuntimeError("layout changed")

    registry = {"nineteenhz": good, "foopee": other, "dice": broken}
    monkeypatch.setattr(scrape, "get_scrapers", lambda names=None: registry)
    return seen_today


@freeze_time("2026-01-20 03:00:00")
def test_build_writes_outputs(output_dir, scrapers):
    assert scrape.main([]) == 0

    # 03:00 UTC is still the previous evening in California
    assert scrapers == ["2026-01-19"] * 3

    payload = json.loads((output_dir / "events.json").read_text())
    assert payload["today"] == "2026-01-19"
    assert payload["dates"] == ["2026-01-19", "2026-01-20"]
    assert [e["title"] for e in payload["events_by_date"]["2026-01-20"]] == ["Early Show", "Late Show"]

    page = (output_dir / "index.html").read_text()
    assert "Monday, January 19, 2026" in page
    assert "Already Happened" not in page

    status = json.loads((output_dir / "scrape-status.json").read_text())
    assert status["all_success"] is False
    assert status["any_success"] is True
    assert status["total_events"] == 3
    assert status["sources"]["nineteenhz"]["event_count"] == 4
    assert status["sources"]["dice"]["success"] is False
    assert status["sources"]["dice"]["error"] == "layout changed"

    log = (output_dir / "scrape-log.txt").read_text()
    assert "--- New Run ---" in log
    assert "Failed to scrape dice" in log


@freeze_time("2026-01-20 03:00:00")
def test_build_keeps_last_success_for_failing_source(output_dir, scrapers):
    (output_dir / "scrape-status.json").write_text(json.dumps({
        "sources": {"dice": {"last_success": "2026-01-18T03:00:00Z", "last_success_count": 12}},
    }))

    scrape.main([])

    status = json.loads((output_dir / "scrape-status.json").read_text())
    assert status["sources"]["dice"]["last_success"] == "2026-01-18T03:00:00Z"
    assert status["sources"]["dice"]["last_success_count"] == 12


@freeze_time("2026-01-20 03:00:00")
def test_build_dry_run_writes_nothing(output_dir, scrapers):
    assert scrape.main(["--dry-run"]) == 0
    assert list(output_dir.iterdir()) == []


@freeze_time("2026-01-20 03:00:00")
def test_build_with_no_sources(output_dir, monkeypatch):
    monkeypatch.setattr(scrape, "get_scrapers", lambda names=None: {})

    scrape.main([])

    payload = json.loads((output_dir / "events.json").read_text())
    assert payload["dates"] == []
    assert "No events found." in (output_dir / "index.html").read_text()


@freeze_time("2026-01-20 03:00:00")
def test_build_trims_old_log_entries(output_dir, scrapers):
    (output_dir / "scrape-log.txt").write_text(
        "[2025-12-01 10:00:00] [INFO] ancient run\n"
        "[2026-01-19 10:00:00] [INFO] recent run\n"
    )

    scrape.main([])

    log = (output_dir / "scrape-log.txt").read_text()
    assert "ancient run" not in log
    assert "recent run" in log


def test_parse_args_sources_subset():
    args = scrape.parse_args(["--sources", "foopee, dice", "--dry-run"])
    assert args.dry_run is True
    assert args.sources == "foopee, dice"
