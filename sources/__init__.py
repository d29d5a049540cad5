"""Sources package for DocDesk.

Provides the library documentation source registry and its YAML loader.
"""

from .loader import (
    load_library_sources,
    is_valid_source_url
)
from .registry import (
    LibrarySourceRegistry,
    normalize_library_name
)

__all__ = [
    'load_library_sources',
    'is_valid_source_url',
    'LibrarySourceRegistry',
    'normalize_library_name'
]
