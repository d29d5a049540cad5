"""Fetch and distill official library documentation pages.

Resolves a library name through the source registry, downloads the page,
reduces the markup to plain text, optionally narrows it to the lines around
a topic and caps the length.
"""

import logging
import time
from dataclasses import dataclass, asdict
from typing import Dict, Any, List, Optional

import requests
from bs4 import BeautifulSoup

from config.settings import settings
from observability.prometheus_metrics import record_fetch_metrics
from sources.registry import LibrarySourceRegistry, normalize_library_name

logger = logging.getLogger(__name__)


class SourceNotFound(Exception):
    """Raised when no documentation source is registered for a library."""

    def __init__(self, library: str, suggestions: List[str]):
        self.library = library
        self.normalized_name = normalize_library_name(library)
        self.suggestions = suggestions
        super().__init__(
            f'Documentation source not found for "{library}". '
            f"Possible sources: {', '.join(suggestions)}."
        )


class FetchFailed(Exception):
    """Raised when a documentation page cannot be retrieved."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


@dataclass
class LibraryDocResult:
    library: str
    source: str
    content: str
    url: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def html_to_text(html: str) -> str:
    """Reduce an HTML page to trimmed, non-blank text lines.

    Script and style blocks are dropped with their content. This is a best
    effort reduction; broken markup may leak fragments.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()

    text = soup.get_text(" ").replace("\xa0", " ")
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def extract_topic_windows(text: str, topic: str, before: int = 3, after: int = 10) -> str:
    """Keep only the lines around each line mentioning ``topic``.

    After a match the scan resumes past the end of its window, so windows
    never overlap. With no matching line the text comes back unchanged.
    """
    needle = topic.lower()
    lines = text.split("\n")
    selected: List[str] = []

    i = 0
    while i < len(lines):
        if needle in lines[i].lower():
            start = max(0, i - before)
            end = min(len(lines), i + after)
            selected.extend(lines[start:end])
            i = end + 1
        else:
            i += 1

    if not selected:
        return text
    return "\n".join(selected)


def truncate_content(text: str, max_length: int = 5000,
                     marker: str = "\n\n... (content truncated)") -> str:
    if len(text) > max_length:
        return text[:max_length] + marker
    return text


class LibraryDocFetcher:
    """Fetch-and-distill pipeline bound to one source registry."""

    def __init__(self, registry: LibrarySourceRegistry, fetch_settings: Optional[Dict[str, Any]] = None):
        self.registry = registry
        config = settings.get_fetch_settings()
        if fetch_settings:
            config.update(fetch_settings)
        self.user_agent = config['user_agent']
        self.timeout = config['timeout']
        self.window_before = config['window_before']
        self.window_after = config['window_after']
        self.max_length = config['max_length']
        self.truncation_marker = config['truncation_marker']

    def fetch_page(self, url: str) -> str:
        """Download a page. No retry; any failure becomes FetchFailed."""
        try:
            response = requests.get(url, timeout=self.timeout, headers={"User-Agent": self.user_agent})
        except requests.RequestException as e:
            raise FetchFailed(url, str(e)) from e

        if not 200 <= response.status_code < 300:
            raise FetchFailed(url, f"HTTP {response.status_code}: {response.reason}", response.status_code)

        return response.text

    def fetch_library_docs(self, library: str, topic: Optional[str] = None) -> LibraryDocResult:
        url = self.registry.resolve(library)
        if url is None:
            record_fetch_metrics("source_not_found", 0.0)
            raise SourceNotFound(library, self.registry.fallback_urls(library))

        start_time = time.time()
        try:
            html = self.fetch_page(url)
        except FetchFailed as e:
            record_fetch_metrics("fetch_failed", time.time() - start_time)
            logger.warning(f"Library docs fetch failed for {library!r}: {e}")
            raise

        content = html_to_text(html)
        if topic:
            content = extract_topic_windows(content, topic, self.window_before, self.window_after)
        content = truncate_content(content, self.max_length, self.truncation_marker)

        duration = time.time() - start_time
        record_fetch_metrics("success", duration)
        logger.info(f"Fetched {library!r} docs from {url} ({len(content)} chars, {duration:.2f}s)")

        return LibraryDocResult(library=library, source=url, content=content, url=url)
