"""Pipelines package for DocDesk.

Provides the fetch-and-distill pipeline for external library documentation.
"""

from .library_docs import (
    LibraryDocFetcher,
    LibraryDocResult,
    SourceNotFound,
    FetchFailed,
    html_to_text,
    extract_topic_windows,
    truncate_content
)

__all__ = [
    'LibraryDocFetcher',
    'LibraryDocResult',
    'SourceNotFound',
    'FetchFailed',
    'html_to_text',
    'extract_topic_windows',
    'truncate_content'
]
