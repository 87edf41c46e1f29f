import json

import httpx
import pytest

from workflowy_inbox.preference_store import PreferenceStore
from workflowy_inbox.utils import Config


class FakeWorkflowy:
    """MockTransport handler that records every request it sees."""

    def __init__(self, me_status=200, create_status=200, create_body=None, fail=False):
        self.me_status = me_status
        self.create_status = create_status
        self.create_body = create_body if create_body is not None else {"ok": True}
        self.fail = fail
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            raise httpx.ConnectError("connection refused", request=request)
        if request.url.path == "/api/me/":
            return httpx.Response(self.me_status, json={"username": "tester"})
        if request.url.path == "/api/bullets/create/":
            if isinstance(self.create_body, (bytes, str)):
                return httpx.Response(self.create_status, content=self.create_body)
            return httpx.Response(self.create_status, json=self.create_body)
        return httpx.Response(404)

    def calls(self, method):
        return [r for r in self.requests if r.method == method]

    def posted(self):
        return [json.loads(r.content) for r in self.calls("POST")]

    @property
    def transport(self):
        return httpx.MockTransport(self)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("WORKFLOWY_API_KEY", raising=False)
    monkeypatch.delenv("WORKFLOWY_SAVE_LOCATION_URL", raising=False)


@pytest.fixture
def prefs_path(tmp_path):
    return tmp_path / "workflowy.inbox.toml"


@pytest.fixture
def cfg(prefs_path):
    return Config(
        api_key="secret-key",
        save_location_url="https://workflowy.com/#/inbox",
        store=PreferenceStore(prefs_path),
    )


@pytest.fixture
def server():
    return FakeWorkflowy()
