"""Pytest configuration for all tests."""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep host credentials and CLAMBAKE_* settings out of every test."""
    for name in list(os.environ):
        if name.startswith("CLAMBAKE_") or name in ("GITHUB_OWNER", "GITHUB_REPO"):
            monkeypatch.delenv(name, raising=False)
