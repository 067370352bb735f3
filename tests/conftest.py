"""Shared fixtures for the Makuwro test suite."""

import json
from unittest.mock import MagicMock

import pytest

from makuwro.api import MakuwroClient, HTTPClient
from makuwro.config import MakuwroConfig


def make_response(status_code=200, json_data=None, text=None):
    """Build a fake requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.request.method = "GET"
    response.request.url = "https://api.makuwro.com/test"

    if json_data is not None:
        response.content = json.dumps(json_data).encode("utf-8")
        response.text = json.dumps(json_data)
        response.json.return_value = json_data
    else:
        response.text = text or ""
        response.content = response.text.encode("utf-8")
        response.json.side_effect = ValueError("No JSON object could be decoded")

    return response


USER_DATA = {
    "id": "u-1",
    "username": "Alice",
    "displayName": "Alice A.",
    "avatarPath": "/avatars/alice.png",
    "bannerPath": "/banners/alice.png",
    "css": "",
    "terms": "",
    "isBanned": False,
    "isStaff": True,
    "lastOnline": 1700000000000,
}


@pytest.fixture
def config():
    """Configuration holding a session token."""
    return MakuwroConfig(token="test-token", timeout=5)


@pytest.fixture
def http(config):
    """HTTP client with a mocked requests session."""
    client = HTTPClient(config)
    client._session = MagicMock()
    return client


@pytest.fixture
def client(config):
    """Makuwro client with a mocked requests session."""
    makuwro = MakuwroClient(config)
    makuwro.http._session = MagicMock()
    return makuwro


@pytest.fixture
def session(client):
    """The mocked session behind the client fixture."""
    return client.http._session


@pytest.fixture
def respond():
    """Factory for fake responses."""
    return make_response


@pytest.fixture
def user_data():
    """Raw user body as the server sends it."""
    return dict(USER_DATA)
