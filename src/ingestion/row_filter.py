import datetime as dt
import re
from dataclasses import dataclass
from typing import Mapping, Optional

CLICKS_COLUMNS = ("clicks", "Clicks")
DOMAIN_COLUMNS = ("domain", "Domain")

LEADING_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class ClickRecord:
    domain: str
    clicks: int
    event_date: dt.date


def _first_value(row: Mapping[str, str], columns: tuple[str, ...]) -> str:
    for column in columns:
        value = row.get(column)
        if value:
            return value
    return ""


def coerce_clicks(value: str) -> int:
    """
    Read the leading integer of a cell ("15", "3.9", "15 clicks").
    Anything without one counts as zero clicks.
    """
    match = LEADING_INT_PATTERN.match(value or "")
    if not match:
        return 0
    return int(match.group(1))


def to_click_record(row: Mapping[str, str], event_date: dt.date) -> Optional[ClickRecord]:
    clicks = coerce_clicks(_first_value(row, CLICKS_COLUMNS))
    domain = _first_value(row, DOMAIN_COLUMNS).strip()
    if clicks <= 0 or not domain:
        return None
    return ClickRecord(domain=domain, clicks=clicks, event_date=event_date)
