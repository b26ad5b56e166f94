import csv
from pathlib import Path
from typing import Dict, Iterator, List

CsvRow = Dict[str, str]


class CsvParseError(ValueError):
    def __init__(self, path: Path, line: int, reason: str) -> None:
        super().__init__(f"{path.name} line {line}: {reason}")
        self.path = path
        self.line = line
        self.reason = reason


def iter_csv_rows(path: Path) -> Iterator[CsvRow]:
    # undecodable bytes become U+FFFD instead of failing the file
    with open(path, "r", newline="", encoding="utf-8-sig", errors="replace") as handle:
        reader = csv.reader(handle, strict=True)
        header: List[str] | None = None
        try:
            for fields in reader:
                values = [value.strip() for value in fields]
                if not values or values == [""]:
                    continue
                if header is None:
                    header = values
                    continue
                if len(values) != len(header):
                    raise CsvParseError(
                        path,
                        reader.line_num,
                        f"expected {len(header)} fields, found {len(values)}",
                    )
                yield dict(zip(header, values))
        except csv.Error as exc:
            raise CsvParseError(path, reader.line_num, str(exc)) from exc


def read_csv_rows(path: Path) -> List[CsvRow]:
    return list(iter_csv_rows(path))
