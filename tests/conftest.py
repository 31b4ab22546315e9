"""Global test fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host SOLAREX_* variables out of Config in tests."""
    for name in list(os.environ):
        if name.startswith("SOLAREX_"):
            monkeypatch.delenv(name)
