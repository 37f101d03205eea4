"""Pytest configuration for tarsift tests."""

import pytest


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep user-level settings and log directories out of the tests."""
    monkeypatch.delenv("TARSIFT_CONFIG", raising=False)
    monkeypatch.delenv("TARSIFT_LOG_DIR", raising=False)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run inside *tmp_path* so root paths can stay short and relative.

    Root paths are matched against the pattern as well, and absolute temp
    paths would leak unrelated characters into those checks.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path
