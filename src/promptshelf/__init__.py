"""File-based prompt store: one markdown file per prompt, two fixed collections.

Layout:
    <storage root>/
        favorites/
            <id>.md     # header block + body (see promptshelf.document)
        templates/
            <id>.md     # starter templates are seeded here on init

<id> is derived from the title on creation (promptshelf.naming) and never
changes. The storage root comes from ``storage.path`` in promptshelf.toml,
falling back to Documents/PromptShelf.

Concurrent writes: none of the operations lock. Two writers of the same
document race and the last write wins.
"""

from promptshelf.config import ShelfConfig, StorageConfig, load_config
from promptshelf.document import decode_document, encode_document
from promptshelf.errors import NotFoundError, ParseError, ShelfError, ShelfIOError, ValidationError
from promptshelf.export import export_archive
from promptshelf.models import COLLECTIONS, FAVORITES, TEMPLATES, Document, DocumentUpdate
from promptshelf.naming import derive_id
from promptshelf.paths import StorageRoot, ensure_collections, resolve_storage_root
from promptshelf.store import PromptStore

__all__ = [
    "COLLECTIONS",
    "FAVORITES",
    "TEMPLATES",
    "Document",
    "DocumentUpdate",
    "NotFoundError",
    "ParseError",
    "PromptStore",
    "ShelfConfig",
    "ShelfError",
    "ShelfIOError",
    "StorageConfig",
    "StorageRoot",
    "ValidationError",
    "decode_document",
    "derive_id",
    "encode_document",
    "ensure_collections",
    "export_archive",
    "load_config",
    "resolve_storage_root",
]
