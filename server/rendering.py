"""Markdown renderings returned by the DocDesk tools."""

from typing import Iterable, List, Optional

from indexer.models import Document, SearchHit
from pipelines.library_docs import LibraryDocResult


def _numbered(items: Iterable[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def render_search_results(query: str, hits: List[SearchHit]) -> str:
    if not hits:
        return f'No documentation found for query: "{query}"'

    blocks = []
    for i, hit in enumerate(hits, start=1):
        doc = hit.document
        blocks.append(
            f"{i}. **{doc.title}** (ID: {doc.id})\n"
            f"   Category: {doc.category} | Tags: {', '.join(doc.tags)}\n"
            f"   {doc.description}\n"
            f"\n"
            f"   Excerpt: {hit.excerpt}\n"
            f"   ---"
        )
    return f"Found {len(hits)} result(s):\n\n" + "\n\n".join(blocks)


def render_document(doc: Document) -> str:
    """Full document view shared by get-doc and resources/read."""
    return (
        f"# {doc.title}\n"
        f"\n"
        f"**Category:** {doc.category}\n"
        f"**Tags:** {', '.join(doc.tags)}\n"
        f"**Version:** {doc.version or 'N/A'}\n"
        f"**Description:** {doc.description}\n"
        f"**Last Updated:** {doc.last_updated.isoformat()}\n"
        f"\n"
        f"---\n"
        f"\n"
        f"{doc.content}"
    )


def render_categories(categories: Iterable[str]) -> str:
    categories = sorted(categories)
    if not categories:
        return "No documentation categories available."
    return f"Available categories:\n{_numbered(categories)}"


def render_library_docs(result: LibraryDocResult, topic: Optional[str] = None) -> str:
    query_line = f"**Search Query:** {topic}\n\n" if topic else ""
    return (
        f"# {result.library} Documentation\n\n"
        f"**Source:** {result.source}\n\n"
        f"{query_line}"
        f"---\n\n"
        f"{result.content}\n\n"
        f"---\n\n"
        f"**Full documentation:** {result.url}"
    )


def render_library_error(library: str, error: Exception, available: List[str]) -> str:
    return (
        f'Error fetching documentation for "{library}": {error}\n\n'
        f"**Available libraries:** {', '.join(available)}\n\n"
        f"You can register additional libraries with the add-library-source tool."
    )


def render_libraries(names: List[str]) -> str:
    return (
        f"Libraries with known documentation sources ({len(names)}):\n\n"
        f"{_numbered(names)}\n\n"
        f"You can fetch documentation for any of these using the fetch-library-docs tool."
    )
