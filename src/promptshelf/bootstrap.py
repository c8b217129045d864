"""Bootstrap: write bundled starter prompts into a new repository.

Starter files live in src/promptshelf/starters/*.md, in the regular document
format. The file stem is the id; title, description and tags come from the
header, the body is the content. Timestamps are stamped at install time.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from importlib import resources
from pathlib import Path

from promptshelf.document import decode_document
from promptshelf.models import DOCUMENT_SUFFIX, TEMPLATES, Document, now_timestamp
from promptshelf.paths import ensure_collections, ensure_dir
from promptshelf.store import write_document

logger = logging.getLogger("promptshelf.bootstrap")


def _starters_dir() -> Path:
    """Return path to bundled starters directory."""
    return Path(str(resources.files("promptshelf") / "starters"))


def starter_documents() -> list[Document]:
    """Load the built-in starter set, sorted by id."""
    starters_dir = _starters_dir()
    if not starters_dir.is_dir():
        return []
    return [
        decode_document(md_file.read_text(encoding="utf-8-sig"), md_file, TEMPLATES)
        for md_file in sorted(starters_dir.glob(f"*{DOCUMENT_SUFFIX}"))
    ]


def seed_starter_documents(collection_path: Path) -> list[str]:
    """Write each starter into collection_path unless a file with its id exists.

    Existing files are never touched, so user edits survive re-seeding.
    Returns the ids that were written.
    """
    ensure_dir(collection_path)
    collection = collection_path.name
    now = now_timestamp()
    written: list[str] = []

    for starter in starter_documents():
        target = collection_path / f"{starter.id}{DOCUMENT_SUFFIX}"
        if target.exists():
            continue
        doc = replace(
            starter,
            use_count=0,
            last_used_at=None,
            created_at=now,
            updated_at=now,
            file_path=target,
            collection=collection,
        )
        write_document(doc)
        written.append(starter.id)

    if written:
        logger.info("seeded %d starter document(s) into %s", len(written), collection_path)
    return written


def init_repository(root: Path) -> Path:
    """Create the collection layout under root and seed the templates collection."""
    ensure_collections(root)
    seed_starter_documents(root / TEMPLATES)
    return root
