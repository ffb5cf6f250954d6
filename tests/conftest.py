"""Shared fixtures: a Bluefox client over a mocked requests.Session."""

import json
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest
import requests

from bluefox_email import BluefoxClient, BluefoxConfig

API_KEY = 'test-api-key'
BASE_URL = 'https://api.bluefox.email/v1'


def build_response(status: int = 200,
                   json_data: Any = None,
                   headers: Optional[Dict[str, str]] = None,
                   reason: str = 'OK',
                   content: Optional[bytes] = None) -> MagicMock:
    """Build a fake requests.Response.

    With ``json_data`` the body is that JSON; with raw ``content`` (or no
    body at all) ``json()`` raises ValueError like requests does.
    """
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.reason = reason
    response.headers = dict(headers or {})

    if json_data is not None:
        response.content = json.dumps(json_data).encode('utf-8')
        response.json.return_value = json_data
    else:
        response.content = content or b''
        response.json.side_effect = ValueError("Expecting value")
    return response


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def config():
    return BluefoxConfig(api_key=API_KEY)


@pytest.fixture
def make_client(session):
    """Factory for clients with custom config values sharing the mocked session."""

    def _make(**config_values) -> BluefoxClient:
        values = {'api_key': API_KEY}
        values.update(config_values)
        return BluefoxClient(BluefoxConfig(**values), session=session)

    return _make


@pytest.fixture
def client(config, session):
    return BluefoxClient(config, session=session)


@pytest.fixture
def no_sleep(monkeypatch):
    """Record backoff sleeps instead of waiting."""
    sleep = MagicMock()
    monkeypatch.setattr('bluefox_email.base_client.time.sleep', sleep)
    return sleep
