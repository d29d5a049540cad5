"""Observability package for DocDesk."""

from .logging import setup_logging, JSONFormatter, ColoredFormatter
from .prometheus_metrics import (
    record_tool_call,
    record_search_metrics,
    record_fetch_metrics,
    set_app_info,
    export_metrics,
    get_metrics_summary,
    docdesk_registry
)

__all__ = [
    'setup_logging',
    'JSONFormatter',
    'ColoredFormatter',
    'record_tool_call',
    'record_search_metrics',
    'record_fetch_metrics',
    'set_app_info',
    'export_metrics',
    'get_metrics_summary',
    'docdesk_registry'
]
