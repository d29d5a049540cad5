"""In-memory documentation store.

Holds internal documents keyed by id. The store owns its documents: values
are copied on the way in and on the way out, so callers never alias stored
entries.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

import yaml

from .models import Document, DocumentSummary, utcnow

logger = logging.getLogger(__name__)


class DocumentNotFound(Exception):
    """Raised when a document id or resource URI does not resolve."""

    def __init__(self, doc_id: str):
        super().__init__(f"Document not found: {doc_id}")
        self.doc_id = doc_id


class DocumentStore:
    """Keyed store of internal documentation entries."""

    def __init__(self, documents: Optional[Iterable[Document]] = None):
        self._docs: Dict[str, Document] = {}
        for doc in documents or ():
            self.upsert(doc)

    def __len__(self) -> int:
        return len(self._docs)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._docs

    def get_all(self) -> List[Document]:
        """Get all documentation entries."""
        return [doc.copy() for doc in self._docs.values()]

    def get_by_id(self, doc_id: str) -> Optional[Document]:
        doc = self._docs.get(doc_id)
        return doc.copy() if doc is not None else None

    def get_categories(self) -> Set[str]:
        return {doc.category for doc in self._docs.values()}

    def get_summaries(self) -> List[DocumentSummary]:
        """Get metadata for every document, without full content."""
        return [doc.summary() for doc in self._docs.values()]

    def upsert(self, document: Document) -> Document:
        """Add or replace a document by id.

        ``last_updated`` is always reset to the current time. No field
        validation happens here; the request boundary owns that.
        """
        stored = document.copy()
        stored.last_updated = utcnow()
        replaced = stored.id in self._docs
        self._docs[stored.id] = stored
        logger.debug(f"{'Replaced' if replaced else 'Added'} document {stored.id!r}")
        return stored.copy()

    def delete(self, doc_id: str) -> bool:
        if doc_id not in self._docs:
            return False
        del self._docs[doc_id]
        logger.debug(f"Deleted document {doc_id!r}")
        return True

    @classmethod
    def from_seed_file(cls, path: Union[str, Path, None]) -> "DocumentStore":
        """Build a store preloaded from a YAML seed file.

        The file holds a ``documents`` list; each entry carries the Document
        fields except ``last_updated``. A missing, unreadable or wrongly shaped
        file yields an empty store.
        """
        store = cls()
        if not path:
            return store

        seed_path = Path(path)
        if not seed_path.exists():
            logger.warning(f"Seed documents file not found: {seed_path}")
            return store

        try:
            with open(seed_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to read seed documents {seed_path}: {e}")
            return store

        if not isinstance(data, dict) or not isinstance(data.get('documents'), list):
            logger.warning(f"Seed file {seed_path} has no 'documents' list")
            return store

        for entry in data['documents']:
            try:
                store.upsert(Document.from_dict(entry))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping invalid seed document in {seed_path}: {e}")

        logger.info(f"Loaded {len(store)} seed documents from {seed_path}")
        return store
