from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Any
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Document:
    """A stored internal documentation entry."""
    id: str
    title: str
    description: str
    content: str
    category: str
    tags: List[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=utcnow)
    version: Optional[str] = None

    def copy(self) -> Document:
        return replace(self, tags=list(self.tags))

    def summary(self) -> DocumentSummary:
        return DocumentSummary(
            id=self.id,
            title=self.title,
            description=self.description,
            category=self.category,
            tags=list(self.tags),
            version=self.version,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "category": self.category,
            "tags": list(self.tags),
            "last_updated": self.last_updated.isoformat(),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Document:
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            content=data.get("content", ""),
            category=data.get("category", ""),
            tags=list(data.get("tags") or []),
            version=data.get("version"),
        )


@dataclass
class DocumentSummary:
    """Document metadata without the body, used for listings."""
    id: str
    title: str
    description: str
    category: str
    tags: List[str] = field(default_factory=list)
    version: Optional[str] = None


@dataclass
class SearchQuery:
    text: str
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    limit: int = 10


@dataclass
class SearchHit:
    document: Document
    score: int
    excerpt: str
