"""Panels: filters, bounded windows and the registry that owns them."""

from .filters import (
    ALL_SERVICES,
    NO_TEXT_FILTERS,
    ServiceFilter,
    TextFilters,
    matches,
    normalize_filter_token,
    normalize_service_token,
)
from .panel import Panel, PanelConfig
from .registry import PanelRegistry

__all__ = [
    "ALL_SERVICES",
    "NO_TEXT_FILTERS",
    "Panel",
    "PanelConfig",
    "PanelRegistry",
    "ServiceFilter",
    "TextFilters",
    "matches",
    "normalize_filter_token",
    "normalize_service_token",
]
