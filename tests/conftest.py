"""Pytest configuration and shared fixtures for Cost Guard tests."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

from src.costguard.config import CostControlConfig, get_resource_limits


def make_git_config(values: Optional[Dict[str, str]] = None) -> Callable[[str], Optional[str]]:
    """Fake ``git config --get`` reader backed by a dict."""
    values = values or {}
    return lambda key: values.get(key)


@pytest.fixture
def fake_git():
    """Factory for fake git config readers."""
    return make_git_config


@pytest.fixture
def no_git():
    """Git reader that knows nothing."""
    return make_git_config()


@pytest.fixture
def write_file(tmp_path: Path):
    """Write a file relative to the temporary project root."""

    def _write(rel_path: str, content: str = "") -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def node_project(tmp_path: Path, write_file):
    """Factory for a project with a package.json manifest."""

    def _make(**manifest) -> Path:
        write_file("package.json", json.dumps(manifest))
        return tmp_path

    return _make


@pytest.fixture
def cost_config() -> CostControlConfig:
    """Sample cost-control configuration for testing."""
    return CostControlConfig(
        project_name="demo-app",
        environment="dev",
        budget=100,
        alert_email="ops@example.com",
        resource_limits=get_resource_limits("dev"),
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep COSTGUARD_* variables from leaking into tests."""
    for var in list(os.environ):
        if var.startswith("COSTGUARD_"):
            monkeypatch.delenv(var, raising=False)
    yield
