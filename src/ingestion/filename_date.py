import datetime as dt
import re
from typing import Optional

# ".2024-03-01_2024-03-07": only the first date is used
FILENAME_DATE_PATTERN = re.compile(r"\.(\d{4}-\d{2}-\d{2})_\d{4}-\d{2}-\d{2}")


def extract_date_from_filename(filename: str) -> Optional[str]:
    match = FILENAME_DATE_PATTERN.search(filename)
    return match.group(1) if match else None


def parse_event_date(filename: str) -> Optional[dt.date]:
    """
    Return the report start date encoded in the filename, or None when the
    name has no date range or the first date is not a real calendar day.
    """
    extracted = extract_date_from_filename(filename)
    if extracted is None:
        return None
    try:
        return dt.date.fromisoformat(extracted)
    except ValueError:
        return None
