"""Export the whole storage root as one zip archive.

    <destination>/PromptShelf-Export-2026-01-05T09-12-44Z.zip
        favorites/
        favorites/my-prompt.md
        templates/
        templates/starter-bug-debugging.md

Entries are deflated, paths are relative to the root, every subdirectory gets
an explicit ``name/`` entry, and all entries carry mode 0644. The export is
not atomic: a failure mid-walk leaves the partial archive in place.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import zipfile
from pathlib import Path

from promptshelf.errors import ShelfIOError
from promptshelf.models import now_timestamp
from promptshelf.paths import ensure_dir

logger = logging.getLogger("promptshelf.export")

ARCHIVE_PREFIX = "PromptShelf-Export-"
ENTRY_MODE = 0o644


def archive_name(timestamp: str | None = None) -> str:
    stamp = (timestamp or now_timestamp()).replace(":", "-").replace(" ", "_")
    return f"{ARCHIVE_PREFIX}{stamp}.zip"


def _add_file(zf: zipfile.ZipFile, path: Path, arcname: str) -> None:
    info = zipfile.ZipInfo.from_file(path, arcname, strict_timestamps=False)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = (stat.S_IFREG | ENTRY_MODE) << 16
    with path.open("rb") as src, zf.open(info, "w") as dst:
        shutil.copyfileobj(src, dst)


def export_archive(storage_root: Path | str, destination_dir: Path | str) -> Path:
    """Zip every file and directory under storage_root into destination_dir.

    Returns the archive path. Raises ShelfIOError on the first read/write
    failure.
    """
    root = Path(storage_root)
    dest = Path(destination_dir)
    ensure_dir(dest)
    archive = dest / archive_name()
    archive_resolved = archive.resolve()

    files = 0
    try:
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
                dirnames.sort()
                current = Path(dirpath)
                rel_dir = current.relative_to(root)
                if current != root:
                    zf.mkdir(rel_dir.as_posix(), mode=ENTRY_MODE)
                for name in sorted(filenames):
                    path = current / name
                    if path.resolve() == archive_resolved:
                        continue
                    _add_file(zf, path, (rel_dir / name).as_posix())
                    files += 1
    except OSError as exc:
        msg = f"failed to export {root} to {archive}: {exc}"
        raise ShelfIOError(msg) from exc

    logger.info("exported %d file(s) from %s to %s", files, root, archive)
    return archive


def _raise(exc: OSError) -> None:
    raise exc
