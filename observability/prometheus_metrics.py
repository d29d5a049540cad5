"""Prometheus metrics for the DocDesk tool server."""

from prometheus_client import Counter, Histogram, Info, generate_latest
from prometheus_client.core import CollectorRegistry
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

# Create custom registry for DocDesk metrics
docdesk_registry = CollectorRegistry()

# Tool metrics
tool_calls = Counter(
    'docdesk_tool_calls_total',
    'Total number of tool calls',
    ['tool', 'status'],
    registry=docdesk_registry
)

# Search metrics
search_requests = Counter(
    'docdesk_search_requests_total',
    'Total number of document searches',
    registry=docdesk_registry
)

search_duration = Histogram(
    'docdesk_search_duration_seconds',
    'Document search duration in seconds',
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
    registry=docdesk_registry
)

search_results_count = Histogram(
    'docdesk_search_results_count',
    'Number of search results returned',
    buckets=[0, 1, 2, 5, 10, 25, 50],
    registry=docdesk_registry
)

# Library documentation fetch metrics
library_fetches = Counter(
    'docdesk_library_fetches_total',
    'Total number of library documentation fetches',
    ['outcome'],
    registry=docdesk_registry
)

library_fetch_duration = Histogram(
    'docdesk_library_fetch_duration_seconds',
    'Library documentation fetch duration in seconds',
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
    registry=docdesk_registry
)

app_info = Info(
    'docdesk_app',
    'Application information',
    registry=docdesk_registry
)


def set_app_info(name: str, version: str) -> None:
    app_info.info({'name': name, 'version': version})


def record_tool_call(tool: str, error: bool = False) -> None:
    tool_calls.labels(tool=tool, status="error" if error else "success").inc()


def record_search_metrics(duration: float, result_count: int) -> None:
    """Record search-related metrics."""
    search_requests.inc()
    search_duration.observe(duration)
    search_results_count.observe(result_count)


def record_fetch_metrics(outcome: str, duration: float) -> None:
    """Record a library fetch; outcome is success, fetch_failed or source_not_found."""
    library_fetches.labels(outcome=outcome).inc()
    if outcome != "source_not_found":
        library_fetch_duration.observe(duration)


def export_metrics() -> bytes:
    """Render all metrics in the Prometheus text exposition format."""
    return generate_latest(docdesk_registry)


def get_metrics_summary() -> Dict[str, Any]:
    """Get a summary of current metrics."""
    summary: Dict[str, Any] = {
        "tool_calls_total": 0.0,
        "tool_errors_total": 0.0,
        "search_requests_total": docdesk_registry.get_sample_value('docdesk_search_requests_total') or 0.0,
        "library_fetches": {},
    }

    for metric in docdesk_registry.collect():
        for sample in metric.samples:
            if sample.name == 'docdesk_tool_calls_total':
                summary["tool_calls_total"] += sample.value
                if sample.labels.get('status') == 'error':
                    summary["tool_errors_total"] += sample.value
            elif sample.name == 'docdesk_library_fetches_total':
                summary["library_fetches"][sample.labels['outcome']] = sample.value

    return summary
