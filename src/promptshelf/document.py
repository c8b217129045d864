"""Read and write prompt files.

On-disk layout of <root>/<collection>/<id>.md:

    ---
    title: "My Prompt"
    tags: ["a", "b"]
    use_count: 0
    created_at: 2026-01-01T10:00:00Z
    updated_at: 2026-01-01T10:00:00Z
    ---

    Body text, free form.

Files without a header block are still valid: the whole text is the body and
the filename stem is the title. The body is not escaped, so a body line of
``---`` is written as-is.
"""

from __future__ import annotations

import re
from pathlib import Path

from promptshelf.header import Header, decode_header, encode_header
from promptshelf.models import Document, now_timestamp

DELIMITER = "---"
BOM = "\ufeff"

_FRONTMATTER_RE = re.compile(r"\A\ufeff?\s*---[ \t]*\r?\n(.*?)^---[ \t]*\r?$", re.DOTALL | re.MULTILINE)


def split_document(text: str) -> tuple[str, str] | None:
    """Return (header_text, body) or None when there is no delimited header."""
    m = _FRONTMATTER_RE.match(text)
    if m is None:
        return None
    return m.group(1), text[m.end():].strip()


def decode_document(raw_text: str, file_path: Path | str, collection: str) -> Document:
    """Decode file text into a Document. Never raises on malformed content."""
    raw_text = raw_text.removeprefix(BOM)
    path = Path(file_path)
    stem = path.stem

    parts = split_document(raw_text)
    if parts is None:
        now = now_timestamp()
        return Document(
            id=stem,
            title=stem,
            content=raw_text.strip(),
            created_at=now,
            updated_at=now,
            file_path=path,
            collection=collection,
        )

    header_text, body = parts
    header = decode_header(header_text)
    return Document(
        id=stem,
        title=header.title if header.title.strip() else stem,
        content=body,
        tags=header.tags,
        description=header.description,
        use_count=header.use_count,
        last_used_at=header.last_used,
        created_at=header.created_at,
        updated_at=header.updated_at,
        file_path=path,
        collection=collection,
    )


def encode_document(doc: Document) -> str:
    """Encode a Document as delimiter, header, delimiter, blank line, body."""
    header = Header(
        title=doc.title,
        tags=list(doc.tags),
        description=doc.description,
        use_count=doc.use_count,
        last_used=doc.last_used_at,
        created_at=doc.created_at,
        updated_at=doc.updated_at,
    )
    return f"{DELIMITER}\n{encode_header(header)}\n{DELIMITER}\n\n{doc.content}"
