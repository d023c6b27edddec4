# recommend/backend/__init__.py
from .config import Settings, get_settings
from .interfaces import SearchBackend, PersonalizationBackend
from .client import (
    HttpSearchBackend,
    HttpPersonalizationBackend,
    get_http_client,
    profile_to_filters,
)

__all__ = [
    "Settings",
    "get_settings",
    "SearchBackend",
    "PersonalizationBackend",
    "HttpSearchBackend",
    "HttpPersonalizationBackend",
    "get_http_client",
    "profile_to_filters",
]
