"""Shared fixtures for n8n-tools tests."""

import pytest
from click.testing import CliRunner

from n8n_tools import core


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def global_config_dir(tmp_path, monkeypatch):
    """Override the global ~/.n8n-tools directory to a temp location."""
    fake_global = tmp_path / "fake_home" / ".n8n-tools"
    fake_global.mkdir(parents=True)
    monkeypatch.setattr(core, "GLOBAL_DIR", fake_global)
    monkeypatch.setattr(core, "GLOBAL_CONFIG", fake_global / "config.yaml")
    return fake_global


@pytest.fixture
def tmp_project(tmp_path, monkeypatch):
    """Create a temporary project directory and cd into it."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


# Example from the n8n HTTP Request node Error Output > Request tab
N8N_POST_REQUEST = {
    "method": "POST",
    "url": "https://api.example.com/users",
    "headers": {"Content-Type": "application/json"},
    "body": {"name": "John", "age": 30},
    "json": True,
}

N8N_POST_CURL = (
    "curl \\\n"
    "  -X POST \\\n"
    "  -H 'Content-Type: application/json' \\\n"
    "  -d '{\"name\":\"John\",\"age\":30}' \\\n"
    "  'https://api.example.com/users'"
)
