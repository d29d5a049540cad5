"""Additive relevance search over the document store."""

import logging
import time
from typing import Dict, List, Optional

from config.settings import settings
from observability.prometheus_metrics import record_search_metrics
from .doc_store import DocumentStore
from .models import Document, SearchHit, SearchQuery

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


class SearchEngine:
    """Scores every stored document against a query.

    Each field that contains the lowercased query text adds its weight to the
    score; documents scoring zero never appear in results.
    """

    def __init__(self,
                 store: DocumentStore,
                 weights: Optional[Dict[str, int]] = None,
                 excerpt_before: Optional[int] = None,
                 excerpt_after: Optional[int] = None):
        self.store = store
        self.weights = weights or settings.get_search_weights()
        window = settings.get_excerpt_window()
        self.excerpt_before = window['before'] if excerpt_before is None else excerpt_before
        self.excerpt_after = window['after'] if excerpt_after is None else excerpt_after

    @staticmethod
    def _passes_filters(doc: Document, query: SearchQuery) -> bool:
        if query.category and doc.category != query.category:
            return False
        if query.tags and not any(tag in doc.tags for tag in query.tags):
            return False
        return True

    def score_document(self, doc: Document, query_text: str) -> int:
        """Compute the additive score for one document."""
        needle = query_text.lower()
        score = 0
        if needle in doc.title.lower():
            score += self.weights['title']
        if needle in doc.description.lower():
            score += self.weights['description']
        if needle in doc.content.lower():
            score += self.weights['content']
        if any(needle in tag.lower() for tag in doc.tags):
            score += self.weights['tag']
        return score

    def build_excerpt(self, doc: Document, query_text: str) -> str:
        """Window the content around the first match, else use the description."""
        position = doc.content.lower().find(query_text.lower())
        if position == -1:
            return doc.description
        start = max(0, position - self.excerpt_before)
        end = min(len(doc.content), position + self.excerpt_after)
        return f"{ELLIPSIS}{doc.content[start:end]}{ELLIPSIS}"

    def search(self, query: SearchQuery) -> List[SearchHit]:
        start_time = time.time()
        hits: List[SearchHit] = []

        for doc in self.store.get_all():
            if not self._passes_filters(doc, query):
                continue

            score = self.score_document(doc, query.text)
            if score <= 0:
                continue

            hits.append(SearchHit(
                document=doc,
                score=score,
                excerpt=self.build_excerpt(doc, query.text),
            ))

        # sorted() is stable, ties keep store order
        hits = sorted(hits, key=lambda hit: hit.score, reverse=True)[:max(query.limit, 0)]

        duration = time.time() - start_time
        record_search_metrics(duration, len(hits))
        logger.debug(f"Search {query.text!r} matched {len(hits)} document(s) in {duration * 1000:.1f}ms")
        return hits
