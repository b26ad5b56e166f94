import argparse
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv

from delivery.event_sender import DEFAULT_ENDPOINT, DryRunEventSender, HubSpotEventSender, load_hubspot_config
from delivery.rate_limiter import RateLimiter
from ingestion.directory_walker import RunSummary, process_all_csv_files

BASE_DIR = Path(__file__).resolve().parents[1]


@dataclass
class Settings:
    input_dir: Path
    event_name: str
    endpoint: str
    request_timeout_seconds: float
    min_interval_seconds: float
    row_delay_seconds: float


def load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def ensure_env_file(base_dir: Path) -> None:
    env_path = base_dir / ".env"
    example_path = base_dir / ".env.example"
    if env_path.exists() or not example_path.exists():
        return
    shutil.copy(example_path, env_path)
    print(f"[info] Created {env_path} from .env.example")


def load_settings(config: dict, args: argparse.Namespace) -> Settings:
    hubspot = config.get("hubspot", {}) or {}
    rate_limit = config.get("rate_limit", {}) or {}

    input_dir = args.input_dir or os.getenv("CSV_FOLDER_PATH") or config.get("input_dir") or "files"
    event_name = args.event_name
    if event_name is None:
        event_name = os.getenv("HUBSPOT_EVENT_NAME") or config.get("event_name") or ""

    return Settings(
        input_dir=Path(input_dir),
        event_name=event_name,
        endpoint=hubspot.get("endpoint", DEFAULT_ENDPOINT),
        request_timeout_seconds=float(hubspot.get("request_timeout_seconds", 30)),
        min_interval_seconds=int(rate_limit.get("min_interval_ms", 100)) / 1000,
        row_delay_seconds=int(rate_limit.get("row_delay_ms", 100)) / 1000,
    )


def run(settings: Settings, dry_run: bool = False) -> RunSummary:
    hubspot_config = load_hubspot_config(settings.endpoint, settings.request_timeout_seconds)
    if dry_run or not hubspot_config:
        if not hubspot_config:
            print("[info] HUBSPOT_API_KEY not configured; running in dry-run mode.")
        sender = DryRunEventSender()
    else:
        # shared by every file in the run
        limiter = RateLimiter(min_interval_seconds=settings.min_interval_seconds)
        sender = HubSpotEventSender(hubspot_config, limiter)

    return process_all_csv_files(
        settings.input_dir,
        sender,
        settings.event_name,
        row_delay_seconds=settings.row_delay_seconds,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Forward per-domain click counts from CSV exports to HubSpot")
    parser.add_argument("--input-dir", help="Directory holding the CSV exports (default: files).")
    parser.add_argument("--event-name", help="HubSpot custom event name.")
    parser.add_argument(
        "--config",
        default=str(BASE_DIR / "config" / "pipeline.yaml"),
        help="Path to the pipeline YAML config.",
    )
    parser.add_argument("--dry-run", action="store_true", help="Build payloads and log them without sending.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    ensure_env_file(BASE_DIR)
    load_dotenv()

    try:
        settings = load_settings(load_yaml(Path(args.config)), args)
        run(settings, dry_run=args.dry_run)
    except Exception as exc:
        print(f"[error] Script execution failed: {exc}", file=sys.stderr)
        return 1
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
