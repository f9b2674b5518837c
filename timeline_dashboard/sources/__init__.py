"""Sources for loading and saving timeline items."""

from timeline_dashboard.sources.json_server import JsonServerClient

__all__ = [
    "JsonServerClient",
]
