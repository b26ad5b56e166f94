import datetime as dt
import os
import sys
from dataclasses import dataclass
from typing import Any, Optional

import requests

from .rate_limiter import RateLimiter

DEFAULT_ENDPOINT = "https://api.hubapi.com/events/v3/send"


class EventDeliveryError(RuntimeError):
    """Raised when a single event could not be delivered to the endpoint."""

    def __init__(self, domain: str, detail: Any) -> None:
        super().__init__(f"Delivery failed for {domain}: {detail}")
        self.domain = domain
        self.detail = detail


@dataclass(frozen=True)
class EventPayload:
    event_name: str
    occurred_at: dt.datetime
    clicks: int
    domain: str

    def to_json(self) -> dict:
        occurred_at = self.occurred_at.astimezone(dt.timezone.utc)
        return {
            "eventName": self.event_name,
            "occurredAt": occurred_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "properties": {
                "clicks": self.clicks,
                "domain": self.domain,
            },
        }


def noon_timestamp(event_date: dt.date, tz: Optional[dt.tzinfo] = None) -> dt.datetime:
    noon = dt.datetime.combine(event_date, dt.time(12, 0, 0, 0))
    if tz is None:
        return noon.astimezone()
    return noon.replace(tzinfo=tz)


def build_payload(
    event_name: str,
    event_date: dt.date,
    clicks: int,
    domain: str,
    tz: Optional[dt.tzinfo] = None,
) -> EventPayload:
    return EventPayload(
        event_name=event_name,
        occurred_at=noon_timestamp(event_date, tz),
        clicks=clicks,
        domain=domain,
    )


@dataclass
class HubSpotConfig:
    api_key: str
    endpoint: str = DEFAULT_ENDPOINT
    timeout_seconds: float = 30


def load_hubspot_config(endpoint: str = DEFAULT_ENDPOINT, timeout_seconds: float = 30) -> Optional[HubSpotConfig]:
    api_key = os.getenv("HUBSPOT_API_KEY", "").strip()
    if not api_key:
        return None
    return HubSpotConfig(api_key=api_key, endpoint=endpoint, timeout_seconds=timeout_seconds)


def _error_detail(exc: requests.RequestException) -> Any:
    response = exc.response
    if response is None:
        return str(exc)
    try:
        return response.json()
    except ValueError:
        return response.text or str(exc)


class HubSpotEventSender:
    """
    Delivers click events to the HubSpot custom event API.
    One attempt per event, always through the shared rate limiter.
    """

    def __init__(
        self,
        config: HubSpotConfig,
        limiter: RateLimiter,
        session: requests.Session | None = None,
        tz: Optional[dt.tzinfo] = None,
    ) -> None:
        self.config = config
        self.limiter = limiter
        self.session = session or requests.Session()
        self.tz = tz

    def send_event(self, event_name: str, event_date: dt.date, clicks: int, domain: str) -> Any:
        payload = build_payload(event_name, event_date, clicks, domain, self.tz)
        try:
            response = self.limiter.schedule(lambda: self._post(payload))
        except requests.RequestException as exc:
            detail = _error_detail(exc)
            print(f"[error] Failed to send event for {domain}: {detail}", file=sys.stderr)
            raise EventDeliveryError(domain, detail) from exc

        print(f"[info] Sent event for {domain} with {clicks} clicks on {event_date.isoformat()}")
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _post(self, payload: EventPayload) -> requests.Response:
        response = self.session.post(
            self.config.endpoint,
            json=payload.to_json(),
            headers={
                "Authorization": f"Bearer {self.config.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.config.timeout_seconds,
        )
        response.raise_for_status()
        return response


class DryRunEventSender:
    """Builds and logs payloads without sending anything."""

    def __init__(self, tz: Optional[dt.tzinfo] = None) -> None:
        self.tz = tz

    def send_event(self, event_name: str, event_date: dt.date, clicks: int, domain: str) -> dict:
        body = build_payload(event_name, event_date, clicks, domain, self.tz).to_json()
        print(f"[info] Dry run: would send {body}")
        return body
