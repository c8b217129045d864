"""Data models for the prompt store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

FAVORITES = "favorites"
TEMPLATES = "templates"
COLLECTIONS = (FAVORITES, TEMPLATES)

DOCUMENT_SUFFIX = ".md"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def now_timestamp() -> str:
    """Current UTC time as YYYY-MM-DDTHH:MM:SSZ."""
    return datetime.now(UTC).strftime(TIMESTAMP_FORMAT)


@dataclass
class Document:
    """A prompt loaded from <root>/<collection>/<id>.md."""

    id: str                            # filename stem, fixed at creation
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    description: str | None = None
    use_count: int = 0
    last_used_at: str | None = None
    created_at: str = ""
    updated_at: str = ""

    # Supplied by the caller on decode, never written into the file
    file_path: Path = field(default_factory=Path, compare=False)
    collection: str = field(default=FAVORITES, compare=False)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match over title, description, content and tags."""
        needle = query.casefold()
        haystack = [self.title, self.description or "", self.content, *self.tags]
        return any(needle in text.casefold() for text in haystack)


@dataclass
class DocumentUpdate:
    """Partial update: fields left as None are not applied."""

    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    description: str | None = None

    def apply(self, doc: Document) -> Document:
        if self.title is not None:
            doc.title = self.title
        if self.content is not None:
            doc.content = self.content
        if self.tags is not None:
            doc.tags = list(self.tags)
        if self.description is not None:
            doc.description = self.description
        return doc

    @property
    def is_empty(self) -> bool:
        return all(v is None for v in (self.title, self.content, self.tags, self.description))
