import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .file_processor import EventSender, FileResult, build_file_task, process_csv_file


class InputDirectoryError(OSError):
    """The input directory could not be listed."""

    reason = "Could not read directory"

    def __init__(self, directory: Path, cause: Optional[OSError] = None) -> None:
        super().__init__(f"{self.reason}: {directory}")
        self.directory = directory
        self.cause = cause


class InputDirectoryNotFound(InputDirectoryError):
    reason = "Directory not found"


class InputDirectoryPermissionDenied(InputDirectoryError):
    reason = "Permission denied accessing directory"


@dataclass
class RunSummary:
    directory: Path
    files_found: int = 0
    files_processed: int = 0
    files_skipped: int = 0
    events_sent: int = 0
    events_failed: int = 0
    directory_error: Optional[InputDirectoryError] = None
    file_results: List[FileResult] = field(default_factory=list)

    def add(self, result: FileResult) -> None:
        self.file_results.append(result)
        if result.skipped:
            self.files_skipped += 1
        else:
            self.files_processed += 1
        self.events_sent += result.events_sent
        self.events_failed += result.events_failed


def list_csv_files(directory: Path) -> List[Path]:
    """
    List .csv files (any case) in the order the filesystem returns them.
    """
    try:
        names = os.listdir(directory)
    except FileNotFoundError as exc:
        raise InputDirectoryNotFound(directory, exc) from exc
    except PermissionError as exc:
        raise InputDirectoryPermissionDenied(directory, exc) from exc
    except OSError as exc:
        raise InputDirectoryError(directory, exc) from exc

    csv_files = []
    for name in names:
        path = directory / name
        if path.suffix.lower() == ".csv" and path.is_file():
            csv_files.append(path)
    return csv_files


def process_all_csv_files(
    directory: Path,
    sender: EventSender,
    event_name: str,
    row_delay_seconds: float = 0.1,
) -> RunSummary:
    summary = RunSummary(directory=directory)
    print(f"[info] Starting to process CSV files from: {directory}")

    try:
        csv_files = list_csv_files(directory)
    except InputDirectoryError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        if exc.cause is not None and type(exc) is InputDirectoryError:
            print(f"[error] {exc.cause}", file=sys.stderr)
        summary.directory_error = exc
        return summary

    summary.files_found = len(csv_files)
    if not csv_files:
        print("[info] No CSV files found in the specified directory.")
        return summary

    print(f"[info] Found {len(csv_files)} CSV files to process")
    for path in csv_files:
        task = build_file_task(path)
        summary.add(process_csv_file(task, sender, event_name, row_delay_seconds))

    print(
        "[info] Completed processing all CSV files "
        f"(files={summary.files_processed}, skipped={summary.files_skipped}, "
        f"sent={summary.events_sent}, failed={summary.events_failed})"
    )
    return summary
