"""Tests for config file resolution order, .env loading and $VAR expansion."""

import yaml

from n8n_tools import core


def _write_config(path, **defaults):
    """Helper to write a config YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump({"defaults": defaults}))


# ── resolve_config_path ─────────────────────────────────────────────────


class TestResolveConfigPath:
    def test_explicit_flag_takes_priority(self, tmp_project, global_config_dir):
        """Explicit -c flag should win over everything else."""
        explicit = tmp_project / "custom" / "my.yaml"
        _write_config(explicit)
        _write_config(tmp_project / ".n8n-tools.yaml", multiline=False)
        _write_config(global_config_dir / "config.yaml", multiline=False)

        assert core.resolve_config_path(str(explicit)) == explicit.resolve()

    def test_explicit_flag_nonexistent_returns_none(self, tmp_project):
        """Explicit -c pointing to missing file returns None (no fallthrough)."""
        _write_config(tmp_project / ".n8n-tools.yaml")
        assert core.resolve_config_path("/nonexistent/config.yaml") is None

    def test_cwd_config_found(self, tmp_project, global_config_dir):
        _write_config(tmp_project / ".n8n-tools.yaml")
        _write_config(global_config_dir / "config.yaml")
        result = core.resolve_config_path(None)
        assert result == (tmp_project / ".n8n-tools.yaml").resolve()

    def test_cwd_variants_in_order(self, tmp_project):
        _write_config(tmp_project / "n8n-tools.yml")
        _write_config(tmp_project / ".n8n-tools.yml")
        result = core.resolve_config_path(None)
        assert result == (tmp_project / ".n8n-tools.yml").resolve()

    def test_global_fallback(self, tmp_project, global_config_dir):
        _write_config(global_config_dir / "config.yaml")
        result = core.resolve_config_path(None)
        assert result == (global_config_dir / "config.yaml").resolve()

    def test_nothing_found(self, tmp_project):
        assert core.resolve_config_path(None) is None


# ── load_config ──────────────────────────────────────────────────────────


class TestLoadConfig:
    def test_none_path(self):
        assert core.load_config(None) == {"defaults": {}, "_config_dir": None}

    def test_missing_file(self, tmp_path):
        assert core.load_config(tmp_path / "missing.yaml")["defaults"] == {}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert core.load_config(path)["defaults"] == {}

    def test_defaults_and_dir(self, tmp_path):
        path = tmp_path / "conf" / "n8n-tools.yaml"
        _write_config(path, multiline=False, headers={"X-A": "1"})
        config = core.load_config(path)
        assert config["defaults"] == {"multiline": False, "headers": {"X-A": "1"}}
        assert config["_config_dir"] == path.parent.resolve()

    def test_non_mapping_top_level(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert core.load_config(path)["defaults"] == {}

    def test_non_mapping_defaults(self, tmp_path):
        path = tmp_path / "scalar.yaml"
        path.write_text("defaults: nope\n")
        assert core.load_config(path)["defaults"] == {}


# ── load_env / resolve_value ─────────────────────────────────────────────


class TestEnv:
    def test_env_file_relative_to_base_dir(self, tmp_path):
        (tmp_path / ".env").write_text("N8N_TEST_TOKEN=from-dotenv\n")
        env = core.load_env(".env", tmp_path)
        assert env["N8N_TEST_TOKEN"] == "from-dotenv"

    def test_env_file_overrides_environ(self, tmp_path, monkeypatch):
        monkeypatch.setenv("N8N_TEST_TOKEN", "from-environ")
        (tmp_path / ".env").write_text("N8N_TEST_TOKEN=from-dotenv\n")
        assert core.load_env(".env", tmp_path)["N8N_TEST_TOKEN"] == "from-dotenv"

    def test_missing_env_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("N8N_TEST_TOKEN", "from-environ")
        assert core.load_env(".env", tmp_path)["N8N_TEST_TOKEN"] == "from-environ"

    def test_resolve_value_forms(self):
        env = {"HOST": "api.test", "TOKEN": "abc"}
        assert core.resolve_value("https://$HOST/x", env) == "https://api.test/x"
        assert core.resolve_value("Bearer ${TOKEN}", env) == "Bearer abc"

    def test_resolve_value_passthrough(self):
        assert core.resolve_value(None, {}) is None
        assert core.resolve_value(5, {}) == 5
        assert core.resolve_value("${N8N_UNSET_VAR_XYZ}", {}) == "${N8N_UNSET_VAR_XYZ}"
