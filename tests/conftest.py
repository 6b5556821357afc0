"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import os

import pytest

from simproc.config import runtime as config_runtime
from tests.helpers.process_fakes import FakeClock


@pytest.fixture(autouse=True)
def _isolated_configuration(monkeypatch):
    """Keep host environment and .env files out of every test."""
    for name in list(os.environ):
        if name.startswith("SIMPROC_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_runtime, "_DOTENV_CANDIDATES", ())
    config_runtime.reset_default_values()
    yield
    config_runtime.reset_default_values()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
