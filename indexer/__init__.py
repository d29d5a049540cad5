"""Internal documentation store and search engine."""

from .models import Document, DocumentSummary, SearchQuery, SearchHit
from .doc_store import DocumentStore, DocumentNotFound
from .search import SearchEngine

__all__ = [
    'Document',
    'DocumentSummary',
    'SearchQuery',
    'SearchHit',
    'DocumentStore',
    'DocumentNotFound',
    'SearchEngine'
]
