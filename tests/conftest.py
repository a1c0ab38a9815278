"""Shared pytest fixtures for kube_facade tests."""

from __future__ import annotations

import os

import pytest
import typer
from typer.testing import CliRunner

from kube_facade.cli.main import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    # Connection settings must come from the test itself
    for key in list(os.environ.keys()):
        if key.startswith("K8S_") or key.startswith("KUBERNETES_SERVICE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app
