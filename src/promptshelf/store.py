"""Collection store: CRUD over <root>/favorites and <root>/templates.

PromptStore is the public API:
    store = PromptStore.from_config(load_config())
    doc = store.create("Code Review", "Review this diff ...", tags=["review"])
    store.record_use(doc.id, "favorites")
    store.update(doc.id, "favorites", DocumentUpdate(tags=["review", "git"]))

Every call re-creates missing collection directories first. There is no
locking: two writers of the same file race and the last write wins.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from promptshelf.document import decode_document, encode_document
from promptshelf.errors import NotFoundError, ShelfIOError, ValidationError
from promptshelf.models import (
    COLLECTIONS,
    DOCUMENT_SUFFIX,
    FAVORITES,
    Document,
    DocumentUpdate,
    now_timestamp,
)
from promptshelf.naming import derive_id, validate_id
from promptshelf.paths import collection_dir, default_root, ensure_collections, resolve_storage_root

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from promptshelf.config import ShelfConfig

logger = logging.getLogger("promptshelf.store")


def read_document(path: Path, collection: str) -> Document:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"failed to read {path}: {exc}"
        raise ShelfIOError(msg) from exc
    return decode_document(text, path, collection)


def write_document(doc: Document) -> None:
    try:
        doc.file_path.write_text(encode_document(doc), encoding="utf-8")
    except OSError as exc:
        msg = f"failed to write {doc.file_path}: {exc}"
        raise ShelfIOError(msg) from exc


class PromptStore:
    """Markdown-file-backed prompt store."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        ensure_collections(self.root)

    @classmethod
    def from_config(
        cls,
        cfg: ShelfConfig,
        default_root_provider: Callable[[], Path] = default_root,
    ) -> PromptStore:
        """Build a store from the ``storage.path`` override in cfg."""
        return cls(resolve_storage_root(cfg.storage.path, default_root_provider))

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _collection_dir(self, collection: str) -> Path:
        path = collection_dir(self.root, collection)
        ensure_collections(self.root)
        return path

    def _doc_path(self, doc_id: str, collection: str) -> Path:
        return self._collection_dir(collection) / f"{validate_id(doc_id)}{DOCUMENT_SUFFIX}"

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def iter_collection(self, collection: str) -> Iterator[Document]:
        """Yield every decodable document in collection, in directory order.

        Unreadable files are logged and skipped so one bad file never hides
        the rest.
        """
        directory = self._collection_dir(collection)
        try:
            entries = list(directory.iterdir())
        except OSError as exc:
            msg = f"failed to list {directory}: {exc}"
            raise ShelfIOError(msg) from exc

        for path in entries:
            if path.suffix != DOCUMENT_SUFFIX or not path.is_file():
                continue
            try:
                yield read_document(path, collection)
            except ShelfIOError:
                logger.warning("skipping unreadable document: %s", path)
                continue

    def list_collection(self, collection: str) -> list[Document]:
        return list(self.iter_collection(collection))

    def list_all(self) -> list[Document]:
        """All documents, favorites first, then templates."""
        docs: list[Document] = []
        for collection in COLLECTIONS:
            docs.extend(self.iter_collection(collection))
        return docs

    def exists(self, doc_id: str, collection: str) -> bool:
        return self._doc_path(doc_id, collection).is_file()

    def get(self, doc_id: str, collection: str) -> Document:
        """Load a single document. Raises NotFoundError if it is missing."""
        path = self._doc_path(doc_id, collection)
        if not path.is_file():
            msg = f"Prompt not found: {doc_id} ({collection})"
            raise NotFoundError(msg)
        return read_document(path, collection)

    def search(
        self,
        query: str | None = None,
        *,
        tag: str | None = None,
        collection: str | None = None,
    ) -> list[Document]:
        """Filter documents by substring query and/or exact tag."""
        docs = self.list_collection(collection) if collection else self.list_all()
        if tag:
            docs = [d for d in docs if tag in d.tags]
        if query:
            docs = [d for d in docs if d.matches(query)]
        return docs

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create(
        self,
        title: str,
        content: str,
        tags: Iterable[str] = (),
        description: str | None = None,
        collection: str = FAVORITES,
    ) -> Document:
        """Create a document whose id is derived from title.

        An existing document with the same id is overwritten.
        """
        doc_id = derive_id(title)
        if not doc_id:
            msg = f"title {title!r} does not yield a usable file name"
            raise ValidationError(msg)

        path = self._doc_path(doc_id, collection)
        if path.exists():
            logger.warning("overwriting existing document %s (%s)", doc_id, collection)

        now = now_timestamp()
        doc = Document(
            id=doc_id,
            title=title,
            content=content,
            tags=list(tags),
            description=description,
            use_count=0,
            created_at=now,
            updated_at=now,
            file_path=path,
            collection=collection,
        )
        write_document(doc)
        logger.info("created %s in %s", doc_id, collection)
        return doc

    def update(
        self,
        doc_id: str,
        collection: str,
        changes: DocumentUpdate | None = None,
    ) -> Document:
        """Apply the provided fields, stamp updated_at and rewrite the file."""
        doc = self.get(doc_id, collection)
        (changes or DocumentUpdate()).apply(doc)
        doc.updated_at = now_timestamp()
        write_document(doc)
        logger.info("updated %s in %s", doc_id, collection)
        return doc

    def record_use(self, doc_id: str, collection: str) -> Document:
        """Increment use_count and stamp last_used_at/updated_at."""
        doc = self.get(doc_id, collection)
        now = now_timestamp()
        doc.use_count += 1
        doc.last_used_at = now
        doc.updated_at = now
        write_document(doc)
        logger.debug("recorded use of %s (%d)", doc_id, doc.use_count)
        return doc

    def delete(self, doc_id: str, collection: str) -> None:
        """Remove the document file. A missing document is not an error."""
        path = self._doc_path(doc_id, collection)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            msg = f"failed to delete {path}: {exc}"
            raise ShelfIOError(msg) from exc
        logger.info("deleted %s from %s", doc_id, collection)
