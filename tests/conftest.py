"""Shared fixtures: a recording fake transport and a client wired to it."""

import json
from typing import Any

import httpx
import pytest

from alks_client import Alks, alks

BASE_URL = "https://alks.example.com/rest"
ACCESS_TOKEN = "abc123"


class RecordingFetch:
    """Fake transport returning a canned response and recording each call."""

    def __init__(self, response: httpx.Response | None = None):
        self.response = response or httpx.Response(200, json={})
        self.calls: list[dict[str, Any]] = []

    async def __call__(
        self,
        url: str,
        *,
        method: str,
        headers: dict[str, str],
        content: str | None = None,
    ) -> httpx.Response:
        self.calls.append(
            {"url": url, "method": method, "headers": headers, "content": content},
        )
        return self.response

    @property
    def last(self) -> dict[str, Any]:
        return self.calls[-1]

    @property
    def last_body(self) -> dict[str, Any]:
        return json.loads(self.last["content"])

    def respond(self, status_code: int = 200, **kwargs: Any) -> None:
        """Set the response for subsequent calls (kwargs as for httpx.Response)."""
        self.response = httpx.Response(status_code, **kwargs)


@pytest.fixture
def fetch() -> RecordingFetch:
    """Fake transport answering 200 with an empty JSON object."""
    return RecordingFetch()


@pytest.fixture
def client(fetch: RecordingFetch) -> Alks:
    """Client with base URL, bearer token and the fake transport."""
    return alks.create(base_url=BASE_URL, access_token=ACCESS_TOKEN, fetch=fetch)
