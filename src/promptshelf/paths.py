"""Storage root resolution and collection directories.

Layout (root resolved from the ``storage.path`` override or the default):

    <root>/
        favorites/
            <id>.md
        templates/
            <id>.md

Override rules:
    ""  / whitespace   default root (user documents dir / PromptShelf), created on demand
    "~"                home directory
    "~/prompts"        home directory / prompts
    "/abs/path"        used as-is
    anything else      ValidationError (never resolved against the cwd)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from platformdirs import user_documents_dir

from promptshelf.errors import ShelfIOError, ValidationError
from promptshelf.models import COLLECTIONS, FAVORITES, TEMPLATES

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("promptshelf.paths")

APP_DIR_NAME = "PromptShelf"
HOME_SHORTHAND = "~"

_SEPARATORS = os.sep + (os.altsep or "")


def default_root() -> Path:
    """Per-application directory inside the platform's documents folder."""
    return Path(user_documents_dir()) / APP_DIR_NAME


def _strip_trailing_separators(raw: str) -> str:
    return raw.rstrip(_SEPARATORS) or raw


def expand_home(raw: str) -> Path:
    """Expand a leading ``~`` or ``~/``; other ``~user`` forms are left alone."""
    if raw == HOME_SHORTHAND:
        return Path.home()
    if len(raw) > 1 and raw[0] == HOME_SHORTHAND and raw[1] in _SEPARATORS:
        return Path.home() / raw[2:]
    return Path(raw)


def ensure_dir(path: Path) -> None:
    """mkdir -p, reporting failures as ShelfIOError."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"failed to create directory {path}: {exc}"
        raise ShelfIOError(msg) from exc


def resolve_storage_root(
    override_path: str | None,
    default_root_provider: Callable[[], Path] = default_root,
) -> Path:
    """Resolve the effective storage root.

    The override comes from configuration and is passed in by the caller.
    Only the default root is created here; an override directory is created
    later by ensure_collections().
    """
    raw = (override_path or "").strip()
    if not raw:
        root = Path(default_root_provider())
        if root.exists() and not root.is_dir():
            msg = f"default storage directory {root} is a file; it must be a directory"
            raise ValidationError(msg)
        ensure_dir(root)
        logger.debug("storage root (default): %s", root)
        return root

    path = expand_home(_strip_trailing_separators(raw))
    if not path.is_absolute():
        msg = "storage.path must be an absolute path or empty (to use the default data directory)"
        raise ValidationError(msg)
    if path.exists() and not path.is_dir():
        msg = f"storage.path points to a file ({path}); it must be a directory"
        raise ValidationError(msg)

    logger.debug("storage root (override): %s", path)
    return path


def validate_collection(collection: str) -> str:
    if collection not in COLLECTIONS:
        msg = f"unknown collection {collection!r} (expected one of: {', '.join(COLLECTIONS)})"
        raise ValidationError(msg)
    return collection


def collection_dir(root: Path, collection: str) -> Path:
    return root / validate_collection(collection)


def ensure_collections(root: Path) -> Path:
    """Create root, favorites/ and templates/ if missing. Returns root."""
    if root.exists() and not root.is_dir():
        msg = f"storage root {root} points to a file; it must be a directory"
        raise ValidationError(msg)
    ensure_dir(root)
    for name in COLLECTIONS:
        ensure_dir(root / name)
    return root


@dataclass(frozen=True)
class StorageRoot:
    """The resolved root and its two collection directories."""

    root: Path

    @property
    def favorites(self) -> Path:
        return self.root / FAVORITES

    @property
    def templates(self) -> Path:
        return self.root / TEMPLATES

    def collection_dir(self, collection: str) -> Path:
        return collection_dir(self.root, collection)

    def ensure(self) -> StorageRoot:
        ensure_collections(self.root)
        return self

    @classmethod
    def resolve(
        cls,
        override_path: str | None,
        default_root_provider: Callable[[], Path] = default_root,
    ) -> StorageRoot:
        return cls(resolve_storage_root(override_path, default_root_provider))
