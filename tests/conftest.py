"""
Pytest configuration for layerconf tests.

Registers custom markers and shared fixtures.
"""

from pathlib import Path

import pytest


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as end-to-end loader tests"
    )


class FakeSecretsClient:
    """In-memory secrets store keyed by path."""

    def __init__(self, store=None, error=None):
        self.store = store or {}
        self.error = error
        self.reads = []

    def read(self, path):
        self.reads.append(path)
        if self.error is not None:
            raise self.error
        return self.store.get(path)


@pytest.fixture
def make_secrets():
    """The FakeSecretsClient class, for tests needing a custom store."""
    return FakeSecretsClient


@pytest.fixture
def fake_secrets():
    """Secrets store holding one database secret."""
    return FakeSecretsClient({"secret/db": {"password": "s3cr3t", "port": 5432}})


@pytest.fixture
def write_config(tmp_path):
    """Factory writing a config file under tmp_path and returning its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
