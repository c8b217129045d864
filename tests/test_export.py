import re
import stat
import zipfile

import pytest

from promptshelf.errors import ShelfIOError
from promptshelf.export import archive_name, export_archive


def test_archive_name_format():
    assert archive_name("2026-01-05T09:12:44Z") == "PromptShelf-Export-2026-01-05T09-12-44Z.zip"
    assert re.match(r"^PromptShelf-Export-\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}Z\.zip$", archive_name())


def test_export_packs_whole_root(store, root, tmp_path):
    store.create("My Prompt", "Hello", ["a"])
    store.create("Tpl", "Body", collection="templates")
    (root / "extra" / "empty").mkdir(parents=True)
    (root / "config.json").write_text("{}")

    dest = tmp_path / "out" / "nested"
    archive = export_archive(root, dest)

    assert archive.parent == dest
    assert archive.exists()
    with zipfile.ZipFile(archive) as zf:
        names = set(zf.namelist())
        assert names == {
            "config.json",
            "extra/",
            "extra/empty/",
            "favorites/",
            "favorites/my-prompt.md",
            "templates/",
            "templates/tpl.md",
        }
        assert zf.read("favorites/my-prompt.md") == (root / "favorites" / "my-prompt.md").read_bytes()

        info = zf.getinfo("favorites/my-prompt.md")
        assert info.compress_type == zipfile.ZIP_DEFLATED
        assert stat.S_IMODE(info.external_attr >> 16) == 0o644

        dir_info = zf.getinfo("extra/empty/")
        assert dir_info.is_dir()
        assert stat.S_IMODE(dir_info.external_attr >> 16) == 0o644


def test_export_into_root_skips_itself(store, root):
    store.create("Only", "x")
    archive = export_archive(root, root / "backups")
    with zipfile.ZipFile(archive) as zf:
        names = zf.namelist()
    assert "backups/" in names
    assert not any(n.endswith(".zip") for n in names)


def test_export_missing_root_raises(tmp_path):
    with pytest.raises(ShelfIOError):
        export_archive(tmp_path / "missing", tmp_path / "out")
