"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
Shared builders live in tests/fixtures/resume_fixtures.py
"""

from unittest.mock import Mock

import pytest

from campus_match.cache import InMemoryCacheBackend, ScoreCache
from campus_match.scorer import ScoringEngine
from tests.fixtures.resume_fixtures import NOW, FakeClock


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "redis: marks tests as requiring a live Redis (deselect with '-m \"not redis\"')"
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def memory_backend(fake_clock):
    return InMemoryCacheBackend(clock=fake_clock)


@pytest.fixture
def counting_engine():
    """Real engine wrapped so calls can be counted."""
    return Mock(wraps=ScoringEngine(clock=lambda: NOW))


@pytest.fixture
def score_cache(memory_backend, counting_engine):
    return ScoreCache(memory_backend, counting_engine)
