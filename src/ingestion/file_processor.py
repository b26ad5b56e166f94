import datetime as dt
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from .csv_reader import CsvParseError, read_csv_rows
from .filename_date import parse_event_date
from .row_filter import to_click_record


class EventSender(Protocol):
    def send_event(self, event_name: str, event_date: dt.date, clicks: int, domain: str) -> Any:
        ...


@dataclass(frozen=True)
class FileTask:
    path: Path
    filename: str
    event_date: Optional[dt.date]


@dataclass
class FileResult:
    filename: str
    rows_read: int = 0
    qualifying_rows: int = 0
    events_sent: int = 0
    events_failed: int = 0
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


def build_file_task(path: Path) -> FileTask:
    return FileTask(path=path, filename=path.name, event_date=parse_event_date(path.name))


def process_csv_file(
    task: FileTask,
    sender: EventSender,
    event_name: str,
    row_delay_seconds: float = 0.1,
    sleep: Callable[[float], None] = time.sleep,
) -> FileResult:
    """Deliver one event per qualifying row; a failed row never stops the file."""
    result = FileResult(filename=task.filename)
    print(f"[info] Processing file: {task.filename}")

    if task.event_date is None:
        print(f"[warn] Could not extract date from filename: {task.filename}", file=sys.stderr)
        result.skipped_reason = "no_date"
        return result

    try:
        rows = read_csv_rows(task.path)
    except (CsvParseError, OSError) as exc:
        print(f"[error] Error processing CSV file {task.filename}: {exc}", file=sys.stderr)
        result.skipped_reason = "parse_error"
        return result

    result.rows_read = len(rows)
    print(f"[info] Found {len(rows)} rows in {task.filename}")

    for row in rows:
        record = to_click_record(row, task.event_date)
        if record is None:
            continue
        result.qualifying_rows += 1
        print(f"[info] Processing row: Domain={record.domain}, Clicks={record.clicks}, Date={record.event_date}")
        try:
            sender.send_event(event_name, record.event_date, record.clicks, record.domain)
            result.events_sent += 1
        except Exception as exc:
            print(f"[error] Error processing row in {task.filename}: {exc}", file=sys.stderr)
            result.events_failed += 1
        sleep(row_delay_seconds)

    print(
        f"[info] Completed processing file: {task.filename} "
        f"(sent={result.events_sent}, failed={result.events_failed})"
    )
    return result
