import json
import threading
import time
from pathlib import Path
from typing import Any, Callable, List

import pytest
import requests


def make_response(status_code: int = 204, body: Any = None, text: str | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = "https://api.hubapi.com/events/v3/send"
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = b""
    return response


class FakeSession:
    """Records every POST and answers from a queue of responses or exceptions."""

    def __init__(self, outcomes: List[Any] | None = None, latency: float = 0.0) -> None:
        self.outcomes = list(outcomes or [])
        self.latency = latency
        self.calls: List[dict] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def post(self, url, json=None, headers=None, timeout=None):
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            self.calls.append(
                {"url": url, "json": json, "headers": headers, "timeout": timeout, "started": time.monotonic()}
            )
            outcome = self.outcomes.pop(0) if self.outcomes else make_response()
        try:
            if self.latency:
                time.sleep(self.latency)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        finally:
            with self._lock:
                self.in_flight -= 1

    @property
    def domains(self) -> List[str]:
        return [call["json"]["properties"]["domain"] for call in self.calls]


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
