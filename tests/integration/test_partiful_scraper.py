import json
from pathlib import Path

import pytest

responses = pytest.importorskip("responses")

from bayevents import config
from bayevents.sources.partiful import collect_records, extract_next_data, fetch_partiful, parse_partiful

FIXTURE = Path("tests/fixtures/partiful_page.html")


def test_parse_partiful_fixture():
    events = parse_partiful(FIXTURE.read_text(), "2026-01-19")

    assert [e.source_id for e in events] == ["p1", "p6"]

    rooftop = events[0]
    assert rooftop.title == "Sunset Rooftop Party"
    assert rooftop.date == "2026-01-23"
    assert rooftop.time == "6:00 PM"
    assert rooftop.venue == "The Rooftop"
    assert rooftop.link == "https://partiful.com/e/p1"
    assert rooftop.source == "partiful"

    disco = events[1]
    assert disco.date == "2026-01-24"
    assert disco.time == "8:30 PM"
    assert disco.venue == "The Lab"
    assert disco.city == "Oakland"
    assert disco.link == "https://partiful.com/e/p6"
    assert disco.category == "electronic"


def test_collect_records_merges_feed_and_sections():
    data = extract_next_data(FIXTURE.read_text())
    records = collect_records(data)
    ids = [r["id"] for r in records]
    assert ids == ["p1", "p2", "p3", "p4", "p5", "p7", "p6"]
    # Feed copy wins over the featured section copy
    assert records[0]["title"] == "Sunset Rooftop Party"


def test_parse_partiful_without_payload():
    assert parse_partiful("<html><body>nothing here</body></html>", "2026-01-19") == []
    assert extract_next_data('<script id="__NEXT_DATA__">{not json</script>') is None


def test_parse_partiful_truncates_long_description():
    record = {
        "id": "long",
        "title": "Talk Night",
        "startDate": "2026-02-01T03:00:00Z",
        "location": {"name": "Hall", "city": "Berkeley"},
        "description": "word " * 100,
    }
    payload = {"props": {"pageProps": {"feed": [record]}}}
    html = f'<script id="__NEXT_DATA__" type="application/json">{json.dumps(payload)}</script>'

    events = parse_partiful(html, "2026-01-19")

    assert len(events) == 1
    assert len(events[0].details) <= 281
    assert events[0].details.endswith("…")


def test_fetch_partiful():
    with responses.RequestsMock() as rsps:
        rsps.add(rsps.GET, config.PARTIFUL_URL, body=FIXTURE.read_text(), status=200)
        events = fetch_partiful("2026-01-19")
    assert len(events) == 2
