"""n8n-tools - a collection of tools for n8n workflow automation."""

from n8n_tools.curlify import RequestConfig, json_to_curl, translate

__all__ = ["RequestConfig", "json_to_curl", "translate"]
