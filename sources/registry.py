"""Registry of documentation URLs for external libraries."""

import re
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .loader import load_library_sources

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_library_name(name: str) -> str:
    """Lowercase and drop everything outside [a-z0-9]."""
    return _NON_ALNUM.sub("", name.lower())


class LibrarySourceRegistry:
    """Maps normalized library names to documentation URLs.

    Lookups are normalization-insensitive, so "LangGraph", "lang-graph" and
    "langgraph" all hit the same entry. Registration overwrites.
    """

    def __init__(self, sources: Optional[Dict[str, str]] = None):
        self._sources: Dict[str, str] = {}
        for name, url in (sources or {}).items():
            self.register(name, url)

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_library_name(name) in self._sources

    def resolve(self, name: str) -> Optional[str]:
        return self._sources.get(normalize_library_name(name))

    def register(self, name: str, url: str) -> str:
        key = normalize_library_name(name)
        previous = self._sources.get(key)
        self._sources[key] = url
        if previous and previous != url:
            logger.info(f"Library source {key!r} changed from {previous} to {url}")
        return key

    def list_names(self) -> List[str]:
        return sorted(self._sources)

    @staticmethod
    def fallback_urls(name: str) -> List[str]:
        """Guess where docs for an unknown library might live. Never fetched."""
        key = normalize_library_name(name)
        return [
            f"https://{key}.readthedocs.io/",
            f"https://docs.{key}.com/",
            f"https://{key}.org/docs/",
            f"https://github.com/{key}/{key}",
        ]

    @classmethod
    def from_yaml(cls, path: Optional[Union[str, Path]] = None) -> "LibrarySourceRegistry":
        return cls(load_library_sources(path))
