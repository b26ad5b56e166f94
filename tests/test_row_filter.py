import datetime as dt

import pytest

from ingestion.row_filter import ClickRecord, coerce_clicks, to_click_record

DAY = dt.date(2024, 3, 1)


def test_qualifying_row_becomes_record():
    record = to_click_record({"domain": "example.com", "clicks": "5"}, DAY)
    assert record == ClickRecord(domain="example.com", clicks=5, event_date=DAY)


def test_capitalized_columns_are_used_as_fallback():
    record = to_click_record({"Domain": "example.org", "Clicks": "3"}, DAY)
    assert record == ClickRecord(domain="example.org", clicks=3, event_date=DAY)


def test_lowercase_column_wins_when_both_present():
    record = to_click_record({"domain": "low.com", "Domain": "up.com", "clicks": "2", "Clicks": "9"}, DAY)
    assert record.domain == "low.com"
    assert record.clicks == 2


def test_empty_lowercase_value_falls_back_to_capitalized():
    record = to_click_record({"domain": "", "Domain": "up.com", "clicks": "", "Clicks": "4"}, DAY)
    assert record == ClickRecord(domain="up.com", clicks=4, event_date=DAY)


@pytest.mark.parametrize(
    "row",
    [
        {"domain": "example.com", "clicks": "0"},
        {"domain": "example.com", "clicks": "-3"},
        {"domain": "example.com", "clicks": "n/a"},
        {"domain": "example.com"},
        {"domain": "", "clicks": "5"},
        {"clicks": "5"},
        {},
    ],
)
def test_non_qualifying_rows_are_dropped(row):
    assert to_click_record(row, DAY) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("12", 12),
        (" 7 ", 7),
        ("3.9", 3),
        ("15abc", 15),
        ("+4", 4),
        ("-2", -2),
        ("abc", 0),
        ("", 0),
        (None, 0),
    ],
)
def test_coerce_clicks(value, expected):
    assert coerce_clicks(value) == expected
