import os

# No tracing traffic from tests
os.environ.setdefault("OPIK_TRACK_DISABLE", "true")

import httpx
import pytest


class ScriptedSend:
    """Fake `send(key, payload)` that replays outcomes in order and records keys."""

    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.keys = []
        self.payloads = []

    def __call__(self, key, payload):
        self.keys.append(key)
        self.payloads.append(payload)
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def calls(self) -> int:
        return len(self.keys)


def ok(data=None):
    return httpx.Response(200, json=data if data is not None else {"ok": True})


def status(code, text="failure"):
    return httpx.Response(code, text=text)


@pytest.fixture
def mock_http():
    """Build an httpx.Client whose requests go to `handler(request)`."""
    clients = []

    def factory(handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


class BrokenStream(httpx.SyncByteStream):
    """Response body that fails partway through reading."""

    def __iter__(self):
        yield b"partial"
        raise httpx.ReadError("connection reset while reading body")


def broken_body(code):
    return httpx.Response(code, stream=BrokenStream())
