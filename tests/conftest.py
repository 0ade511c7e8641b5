"""Shared fixtures for Entrez client tests."""

from unittest.mock import MagicMock

import pytest
import requests

from entrez_client.rate_limiter import RateLimiter


class FakeClock:
    """Controllable clock whose sleep advances time instead of blocking."""

    def __init__(self, now: float = 100.0):
        self.now = now
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    """Rate limiter driven by the fake clock."""
    return RateLimiter(clock=clock, sleep=clock.sleep)


@pytest.fixture
def response():
    """A successful raw response."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = 200
    resp.ok = True
    resp.text = "<eSearchResult/>"
    return resp


@pytest.fixture
def session(response):
    """Session double returning the canned response."""
    sess = MagicMock(spec=requests.Session)
    sess.get.return_value = response
    return sess
