"""Shared fixtures."""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep runner/CI environment variables from leaking into config and event loading."""
    for name in list(os.environ):
        if name.startswith(("PRCARDS_", "INPUT_", "GITHUB_")):
            monkeypatch.delenv(name, raising=False)
