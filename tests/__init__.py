#!/usr/bin/env python3
"""
Test suite for campus_match.

All tests can be run with standard Python tools:

    # Run all tests (live Redis tests skip if Redis is unreachable)
    python -m pytest tests/ -v

    # Skip live Redis tests
    python -m pytest tests/ -v -m "not redis"

Redis Setup:
    Live cache tests connect to TEST_REDIS_URL, defaulting to
    redis://localhost:6379/15. Start one with:

    docker run --rm -p 6379:6379 redis:7
"""

import os

TEST_REDIS_URL = os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")
