"""n8n_tools curlify - n8n HTTP request config to curl command translation."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

SEPARATOR = " \\\n  "

# encodeURIComponent leaves these unescaped on top of letters, digits and "_.-~"
_FORM_SAFE = "!*'()"


@dataclass(frozen=True)
class RequestConfig:
    """One captured n8n HTTP request. Every field is optional."""

    method: Any = None
    url: Any = None
    headers: Mapping[str, Any] = field(default_factory=dict)
    form: Any = None
    body: Any = None
    json: Any = None
    gzip: Any = None
    reject_unauthorized: Any = None
    follow_redirect: bool = False
    timeout: Any = None
    resolve_with_full_response: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> RequestConfig:
        """Build from a parsed request mapping.

        - uri wins over url when both are set
        - followRedirect and followAllRedirects are aliases
        - unknown keys are ignored
        """
        data = data or {}
        headers = data.get("headers")
        return cls(
            method=data.get("method"),
            url=data.get("uri") if is_truthy(data.get("uri")) else data.get("url"),
            headers=dict(headers) if isinstance(headers, Mapping) else {},
            form=data.get("form"),
            body=data.get("body"),
            json=data.get("json"),
            gzip=data.get("gzip"),
            reject_unauthorized=data.get("rejectUnauthorized"),
            follow_redirect=is_truthy(data.get("followRedirect"))
            or is_truthy(data.get("followAllRedirects")),
            timeout=data.get("timeout"),
            resolve_with_full_response=data.get("resolveWithFullResponse"),
        )


def is_truthy(value: Any) -> bool:
    """Truthiness of loosely-typed request data.

    Empty dicts and lists count as set; None, False, 0, NaN and "" do not.
    """
    if value is None or value is False or value == "":
        return False
    if isinstance(value, float):
        return value != 0 and not math.isnan(value)
    if isinstance(value, int):
        return value != 0
    return True


def to_text(value: Any) -> str:
    """Render a JSON scalar the way it reads in the captured request."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, dict | list):
        return _compact_json(value)
    return str(value)


def shell_escape(value: str) -> str:
    """Make value safe inside a single-quoted shell string."""
    return value.replace("'", "'\\''")


def encode_form(form: Mapping[str, Any]) -> str:
    """Percent-encode form fields as k=v pairs joined with '&'."""
    return "&".join(
        f"{quote(to_text(k), safe=_FORM_SAFE)}={quote(to_text(v), safe=_FORM_SAFE)}"
        for k, v in form.items()
    )


def timeout_seconds(timeout_ms: Any) -> int | None:
    """Milliseconds to whole seconds, rounded up. None if not numeric."""
    if isinstance(timeout_ms, bool):
        return None
    if isinstance(timeout_ms, int):
        return -(-timeout_ms // 1000)
    try:
        ms = float(timeout_ms)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(ms) or math.isinf(ms):
        return None
    return math.ceil(ms / 1000)


def json_to_curl(
    config: RequestConfig | Mapping[str, Any] | None,
    *,
    multiline: bool = True,
    escape_url: bool = False,
) -> str:
    """Convert an n8n request configuration to a curl command string.

    Flags are emitted in a fixed order: method, headers, form body, JSON
    body, raw body, --compressed, -k, -L, --max-time, -i, then the URL.
    The form, JSON and raw body checks are independent of each other, so
    a config carrying both a form and a JSON body yields two -d flags.

    Missing fields are skipped; an empty config gives a bare "curl".
    """
    if not isinstance(config, RequestConfig):
        config = RequestConfig.from_dict(config)

    parts = ["curl"]

    method = to_text(config.method).upper() if is_truthy(config.method) else "GET"
    if method != "GET":
        parts.append(f"-X {method}")

    for key, value in config.headers.items():
        parts.append(f"-H '{key}: {shell_escape(to_text(value))}'")

    has_form = isinstance(config.form, Mapping) and len(config.form) > 0
    if has_form:
        parts.append(f"-d '{shell_escape(encode_form(config.form))}'")

    has_body = is_truthy(config.body)
    if has_body and is_truthy(config.json):
        parts.append(f"-d '{shell_escape(_body_text(config.body))}'")

    if has_body and not is_truthy(config.json) and not has_form:
        parts.append(f"-d '{shell_escape(_body_text(config.body))}'")

    if is_truthy(config.gzip):
        parts.append("--compressed")

    if config.reject_unauthorized is False:
        parts.append("-k")

    if config.follow_redirect:
        parts.append("-L")

    if is_truthy(config.timeout):
        seconds = timeout_seconds(config.timeout)
        if seconds is not None:
            parts.append(f"--max-time {seconds}")

    if is_truthy(config.resolve_with_full_response):
        parts.append("-i")

    if is_truthy(config.url):
        url = to_text(config.url)
        parts.append(f"'{shell_escape(url) if escape_url else url}'")

    return (SEPARATOR if multiline else " ").join(parts)


translate = json_to_curl


def _body_text(body: Any) -> str:
    if isinstance(body, str):
        return body
    return _compact_json(body)


def _compact_json(value: Any) -> str:
    return json.dumps(_js_numbers(value), separators=(",", ":"), ensure_ascii=False)


def _js_numbers(value: Any) -> Any:
    """Write numbers the way the n8n side would: 10.0 as 10, NaN/inf as null."""
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        # 1e21 and up keep exponent notation
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, dict):
        return {k: _js_numbers(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_js_numbers(v) for v in value]
    return value
