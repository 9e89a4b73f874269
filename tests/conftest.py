# tests/conftest.py

import pytest
import requests
from unittest.mock import MagicMock

from starrocks_connector.common.settings import Settings


class FakeTransport:
    """
    Stand-in for ``requests.request``. Plays back ``replies`` in order; an
    exception instance is raised instead of returned.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def __call__(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_response(status_code=200, text=""):
    r = MagicMock(spec=requests.Response)
    r.status_code = status_code
    r.text = text
    return r


@pytest.fixture
def settings():
    return Settings.of(
        {
            "starrocks.fenodes": "fe1:8030",
            "starrocks.table.identifier": "sales.orders",
            "starrocks.request.auth.user": "root",
            "starrocks.request.auth.password": "secret",
            "starrocks.request.retries": "3",
        }
    )


@pytest.fixture
def transport():
    """Factory: ``transport(reply, ...)`` builds a FakeTransport."""
    return FakeTransport


@pytest.fixture
def response():
    """Factory: ``response(status_code, text)`` builds a fake HTTP response."""
    return make_response
