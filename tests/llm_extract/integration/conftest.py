"""Shared fixtures for llm-extract integration tests.

These tests require a real API key and make actual API calls.
Run with: pytest -m integration
"""

import os

import pytest


@pytest.fixture
def require_openai_api_key() -> str:
    """Skip test if OPENAI_API_KEY is not set, otherwise return the key."""
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        pytest.skip("OPENAI_API_KEY not set")
    return api_key
