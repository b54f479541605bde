"""n8n_tools core - config loading, variable resolution, request input."""

import json
import os
import re
import sys
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values

GLOBAL_DIR = Path.home() / ".n8n-tools"
GLOBAL_CONFIG = GLOBAL_DIR / "config.yaml"

CWD_CONFIG_CANDIDATES = [
    ".n8n-tools.yaml",
    ".n8n-tools.yml",
    "n8n-tools.yaml",
    "n8n-tools.yml",
]


def resolve_path(
    candidates: list[Path],
    default: Path | None = None,
) -> Path | None:
    """Return the first existing path from candidates, else default."""
    for p in candidates:
        if p.exists():
            return p.resolve()
    return default


def resolve_config_path(config_file: str | None) -> Path | None:
    """Find the config file to use.

    Resolution order:
      1. Explicit -c flag (hard, no fallthrough if missing)
      2. .n8n-tools.yaml (variants) in CWD
      3. ~/.n8n-tools/config.yaml
    """
    if config_file:
        return resolve_path([Path(config_file)])
    return resolve_path([Path(c) for c in CWD_CONFIG_CANDIDATES] + [GLOBAL_CONFIG])


def load_config(config_path: str | Path | None) -> dict:
    """Load YAML config file. Returns empty defaults if not found.

    Stores '_config_dir' in the returned dict so env_file can be
    resolved relative to the config file.
    """
    if config_path is None:
        return {"defaults": {}, "_config_dir": None}
    path = Path(config_path)
    if not path.exists():
        return {"defaults": {}, "_config_dir": None}
    with open(path) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        data = {}
    defaults = data.get("defaults")
    return {
        "defaults": defaults if isinstance(defaults, dict) else {},
        "_config_dir": path.resolve().parent,
    }


def load_env(env_file: str | None, base_dir: str | Path | None = None) -> dict[str, str]:
    """Load .env file and merge with os.environ.

    .env values take precedence over os.environ.
    """
    env = dict(os.environ)
    if env_file:
        dotenv_path = Path(base_dir or ".") / env_file
        if dotenv_path.exists():
            dotenv_vars = dotenv_values(str(dotenv_path))
            env.update({k: v for k, v in dotenv_vars.items() if v is not None})
    return env


def resolve_value(value: Any, env: dict[str, str]) -> Any:
    """Resolve $VAR and ${VAR} references in a string value.

    Unknown variables are left as written. Non-strings pass through.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value

    def _replace(m: re.Match) -> str:
        var_name = m.group(1) or m.group(2)
        return env.get(var_name, os.environ.get(var_name, m.group(0)))

    return re.sub(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)", _replace, value)


# ── Request input ────────────────────────────────────────────────────────


def load_request_input(source: str | None, stdin=None) -> dict:
    """Load an n8n request config from a JSON string, a file path, or stdin.

    Returns: {"config": {...}, "source": "file"|"literal"|"stdin",
              "path": Path | None, "error": None}
    A file that exists is always read as a file, never as literal JSON.
    """
    result: dict[str, Any] = {
        "config": None,
        "source": None,
        "path": None,
        "error": None,
    }

    if not source:
        result["error"] = "Error: No input provided"
        return result

    if source == "-":
        result["source"] = "stdin"
        text = (stdin or sys.stdin).read()
        if not text.strip():
            result["error"] = "Error: No input provided"
            return result
        return _parse_request_json(text, result, "Error parsing JSON")

    path = Path(source)
    if _is_file(path):
        result["source"] = "file"
        result["path"] = path
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            result["error"] = f"Error reading file: {e}"
            return result
        return _parse_request_json(text, result, "Error reading file")

    result["source"] = "literal"
    return _parse_request_json(source, result, "Error parsing JSON")


def _is_file(path: Path) -> bool:
    # Long JSON strings can exceed the OS name limit
    try:
        return path.is_file()
    except (OSError, ValueError):
        return False


def _parse_request_json(text: str, result: dict, error_prefix: str) -> dict:
    try:
        data = json.loads(text)
    except ValueError as e:
        result["error"] = f"{error_prefix}: {e}"
        return result
    if not isinstance(data, dict):
        result["error"] = (
            f"Error: expected a JSON object with request fields, got {type(data).__name__}"
        )
        return result
    result["config"] = data
    return result


def apply_defaults(
    request: dict,
    defaults: dict,
    env: dict[str, str],
    extra_headers: dict[str, str] | None = None,
) -> dict:
    """Merge config and CLI headers into request, returning a new dict.

    With nothing to merge, request itself is returned.

    Priority: -H flags > config default headers > captured headers.
    Header names match case-insensitively; an overridden header keeps its
    position and takes the override's spelling.
    """
    config_headers = defaults.get("headers")
    if not isinstance(config_headers, dict):
        config_headers = {}
    overrides = {k: resolve_value(v, env) for k, v in config_headers.items()}
    overrides.update(extra_headers or {})
    if not overrides:
        return request

    captured = request.get("headers")
    headers = dict(captured) if isinstance(captured, dict) else {}
    for name, value in overrides.items():
        existing = next((k for k in headers if k.lower() == name.lower()), None)
        if existing is None:
            headers[name] = value
        else:
            headers = {
                (name if k == existing else k): (value if k == existing else v)
                for k, v in headers.items()
            }
    return {**request, "headers": headers}
