import pytest

responses = pytest.importorskip("responses")
from responses import matchers

from bayevents import config
from bayevents.sources.dice import fetch_dice, merge_windows, parse_dice


def record(id, name, date, city="San Francisco", age_limit="18+", **extra):
    data = {
        "id": id,
        "name": name,
        "date": date,
        "venue": {"name": "The Midway", "city": city},
        "age_limit": age_limit,
        "price": "$25",
        "url": f"https://dice.fm/event/{id}",
    }
    data.update(extra)
    return data


def window(name):
    return matchers.query_param_matcher({"city": config.DICE_CITY, "date_window": name})


def test_merge_windows_keeps_first_copy():
    merged = merge_windows([
        {"data": [{"id": "a", "n": 1}, {"id": "b"}]},
        {"data": [{"id": "a", "n": 2}, {"id": "c"}]},
        None,
    ])
    assert [r["id"] for r in merged] == ["a", "b", "c"]
    assert merged[0]["n"] == 1


def test_parse_dice_filters_and_maps():
    payloads = [{"data": [
        record("d1", "Warehouse Techno", "2026-01-24T06:00:00Z", lineup=[{"name": "DJ One"}, "DJ Two"]),
        record("d2", "Strict Club", "2026-01-24T06:00:00Z", age_limit="21+"),
        record("d3", "Elsewhere", "2026-01-24T06:00:00Z", city="Los Angeles"),
        record("d4", "Last Week", "2026-01-02T06:00:00Z"),
    ]}]

    events = parse_dice(payloads, "2026-01-19")

    assert len(events) == 1
    event = events[0]
    assert event.title == "Warehouse Techno"
    assert event.date == "2026-01-23"
    assert event.time == "10:00 PM"
    assert event.venue == "The Midway"
    assert event.bands == ("DJ One", "DJ Two")
    assert event.details == "$25 | 18+"
    assert event.link == "https://dice.fm/event/d1"
    assert event.category == "electronic"


def test_fetch_dice_polls_each_window_and_dedupes():
    shared = record("d1", "Warehouse Techno", "2026-01-24T06:00:00Z")
    later = record("d5", "Indie Rock Night", "2026-02-03T04:00:00Z")

    with responses.RequestsMock() as rsps:
        rsps.add(rsps.GET, config.DICE_API_URL, json={"data": [shared]}, match=[window("this_week")])
        rsps.add(rsps.GET, config.DICE_API_URL, status=500, match=[window("next_week")])
        rsps.add(rsps.GET, config.DICE_API_URL, json={"data": [shared, later]}, match=[window("this_month")])

        events = fetch_dice("2026-01-19")

    assert [e.source_id for e in events] == ["d1", "d5"]
    assert events[1].category == "live"


def test_fetch_dice_all_windows_failing():
    with responses.RequestsMock() as rsps:
        for name in config.DICE_DATE_WINDOWS:
            rsps.add(rsps.GET, config.DICE_API_URL, body="<html>oops</html>", status=200, match=[window(name)])
        assert fetch_dice("2026-01-19") == []
