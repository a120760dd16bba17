"""HTTP client for the custom task REST API."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any

import httpx

from actionsync import __version__
from actionsync.payload import FullPayload, TaskPayload
from actionsync.settings import SyncSettings
from actionsync.ui import Reporter

REFERER = "https://app.superannotate.com/"

_BEARER_PREFIX = re.compile(r"^[Bb]earer\s+")
_WHITESPACE = re.compile(r"\s+")


def sanitize_token(token: str | None) -> str:
    """Strip a leading ``Bearer`` prefix and every whitespace character."""
    if not token:
        return ""
    return _WHITESPACE.sub("", _BEARER_PREFIX.sub("", token))


@dataclass(frozen=True)
class ApiResponse:
    """Status code plus body: parsed JSON when possible, raw text otherwise."""

    status: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "ApiResponse":
        try:
            data = response.json()
        except ValueError:
            data = response.text
        return cls(status=response.status_code, data=data)

    def describe(self) -> str:
        """Render the body for diagnostics."""
        return json.dumps(self.data)


def _finite_only(value: Any) -> Any:
    """Replace NaN and infinities with None, recursing into lists and dicts."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _finite_only(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite_only(item) for item in value]
    return value


def encode_body(payload: TaskPayload) -> str:
    """Serialize a payload as strict JSON.

    Values YAML can express but JSON cannot are mapped: non-finite floats to
    ``null``, anything else non-native (dates) to its string form.
    """
    return json.dumps(_finite_only(payload.to_json()), default=str, allow_nan=False)


def _extract_task_id(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    results = data.get("results")
    if isinstance(results, list) and results and isinstance(results[0], dict):
        found = results[0].get("id")
        if found:
            return str(found)
    found = data.get("id")
    return str(found) if found else None


class CustomTaskClient:
    """Client for the custom task endpoint.

    Requests carry no timeout and are never retried; transport failures on
    create/update propagate to the caller.
    """

    def __init__(
        self,
        settings: SyncSettings,
        token: str,
        *,
        reporter: Reporter | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.endpoint = settings.task_endpoint
        self.reporter = reporter or Reporter(emoji=settings.emoji)
        self.client = httpx.Client(
            headers={
                "Authorization": token,
                "Auth-Type": "sdk",
                "Referer": REFERER,
                "Content-Type": "application/json",
                "User-Agent": f"Github Pipeline: {__version__}",
            },
            timeout=None,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> CustomTaskClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _send(self, method: str, url: str, payload: TaskPayload | None = None) -> ApiResponse:
        content = encode_body(payload) if payload is not None else None
        response = self.client.request(method, url, content=content)
        return ApiResponse.from_httpx(response)

    def find_task_id(self, name: str) -> str | None:
        """Return the id of the task called ``name``, or None.

        Transport failures are reported and treated as "not found".
        """
        try:
            response = self.client.get(self.endpoint, params={"name": name})
        except httpx.HTTPError as exc:
            self.reporter.error(f"Error checking task existence: {exc}")
            return None
        return _extract_task_id(ApiResponse.from_httpx(response).data)

    def create_task(self, payload: FullPayload) -> ApiResponse:
        """POST a new task definition."""
        return self._send("POST", self.endpoint, payload)

    def update_task(self, task_id: str, payload: TaskPayload) -> ApiResponse:
        """PATCH an existing task with either payload variant."""
        return self._send("PATCH", f"{self.endpoint}/{task_id}", payload)
