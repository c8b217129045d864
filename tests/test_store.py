import re
import shutil

import pytest

from promptshelf.config import ShelfConfig, StorageConfig
from promptshelf.errors import NotFoundError, ValidationError
from promptshelf.models import DocumentUpdate
from promptshelf.store import PromptStore

TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


def test_constructor_creates_collections(root):
    PromptStore(root)
    assert (root / "favorites").is_dir()
    assert (root / "templates").is_dir()


def test_from_config_uses_storage_path(tmp_path):
    cfg = ShelfConfig(storage=StorageConfig(path=str(tmp_path / "custom")))
    store = PromptStore.from_config(cfg, lambda: tmp_path / "unused")
    assert store.root == tmp_path / "custom"
    assert not (tmp_path / "unused").exists()


def test_from_config_empty_path_uses_default(tmp_path):
    store = PromptStore.from_config(ShelfConfig(), lambda: tmp_path / "default")
    assert store.root == tmp_path / "default"
    assert (tmp_path / "default" / "favorites").is_dir()


def test_from_config_rejects_relative_path(tmp_path):
    cfg = ShelfConfig(storage=StorageConfig(path="relative/path"))
    with pytest.raises(ValidationError):
        PromptStore.from_config(cfg, lambda: tmp_path / "default")


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


def test_create_example(store, root):
    doc = store.create("My Prompt", "Hello", ["a", "b"], None, "favorites")
    assert doc.id == "my-prompt"
    assert doc.file_path == root / "favorites" / "my-prompt.md"
    assert doc.use_count == 0
    assert doc.last_used_at is None
    assert doc.created_at == doc.updated_at
    assert TIMESTAMP.match(doc.created_at)

    text = doc.file_path.read_text(encoding="utf-8")
    assert text.startswith("---\n")
    assert 'tags: ["a", "b"]' in text
    assert "use_count: 0" in text
    assert "description" not in text
    assert text.endswith("---\n\nHello")


def test_create_round_trips_through_get(store):
    created = store.create("Review", "Check this diff", ["git"], "Code review", "templates")
    loaded = store.get("review", "templates")
    assert loaded == created
    assert loaded.collection == "templates"


def test_create_rejects_title_without_usable_id(store):
    with pytest.raises(ValidationError):
        store.create("???", "body")


def test_create_rejects_unknown_collection(store):
    with pytest.raises(ValidationError):
        store.create("T", "body", collection="archive")


def test_create_same_id_overwrites(store, caplog):
    store.create("Hello World", "first")
    with caplog.at_level("WARNING", logger="promptshelf.store"):
        store.create("hello world!", "second")
    assert "overwriting" in caplog.text
    docs = store.list_collection("favorites")
    assert len(docs) == 1
    assert docs[0].content == "second"
    assert docs[0].title == "hello world!"


def test_create_recreates_missing_root(store, root):
    shutil.rmtree(root)
    doc = store.create("Fresh", "body")
    assert doc.file_path.exists()


# ---------------------------------------------------------------------------
# list / get / search
# ---------------------------------------------------------------------------


def test_list_all_covers_both_collections(store):
    store.create("A", "a", collection="favorites")
    store.create("B", "b", collection="templates")
    docs = store.list_all()
    assert sorted((d.collection, d.id) for d in docs) == [("favorites", "a"), ("templates", "b")]


def test_list_skips_other_suffixes_and_unreadable_files(store, root, caplog):
    store.create("Good", "ok")
    (root / "favorites" / "notes.txt").write_text("ignored")
    (root / "favorites" / "binary.md").write_bytes(b"\xff\xfe\x00broken")
    (root / "favorites" / "dir.md").mkdir()

    with caplog.at_level("WARNING", logger="promptshelf.store"):
        docs = store.list_collection("favorites")

    assert [d.id for d in docs] == ["good"]
    assert "binary.md" in caplog.text


def test_list_includes_headerless_files(store, root):
    (root / "templates" / "Plain Note.md").write_text("  just text\n")
    (doc,) = store.list_collection("templates")
    assert doc.id == "Plain Note"
    assert doc.title == "Plain Note"
    assert doc.content == "just text"


def test_list_on_missing_root_returns_empty(store, root):
    shutil.rmtree(root)
    assert store.list_all() == []
    assert (root / "favorites").is_dir()


def test_get_missing_raises(store):
    with pytest.raises(NotFoundError):
        store.get("nope", "favorites")


def test_get_rejects_path_escape(store):
    with pytest.raises(ValidationError):
        store.get("../templates/x", "favorites")


def test_search_by_query_and_tag(store):
    store.create("Bug hunt", "Find the root cause", ["debugging"])
    store.create("Release notes", "Summarise changes", ["writing"], "Weekly notes")
    store.create("Refactor", "Clean up", ["debugging", "code"], collection="templates")

    assert {d.id for d in store.search("ROOT")} == {"bug-hunt"}
    assert {d.id for d in store.search("weekly")} == {"release-notes"}
    assert {d.id for d in store.search(tag="debugging")} == {"bug-hunt", "refactor"}
    assert {d.id for d in store.search("clean", tag="debugging")} == {"refactor"}
    assert {d.id for d in store.search(tag="debugging", collection="favorites")} == {"bug-hunt"}
    assert store.search("zzz") == []


# ---------------------------------------------------------------------------
# update / record_use / delete
# ---------------------------------------------------------------------------


def test_update_applies_only_given_fields(store):
    original = store.create("Prompt", "body", ["x"], "desc")
    store.record_use("prompt", "favorites")

    updated = store.update("prompt", "favorites", DocumentUpdate(tags=["y", "z"]))

    assert updated.tags == ["y", "z"]
    assert updated.title == original.title
    assert updated.content == original.content
    assert updated.description == "desc"
    assert updated.use_count == 1
    assert updated.created_at == original.created_at
    assert updated.id == "prompt"
    assert store.get("prompt", "favorites") == updated


def test_update_title_keeps_id_and_file(store, root):
    store.create("Old Title", "body")
    doc = store.update("old-title", "favorites", DocumentUpdate(title="New Title"))
    assert doc.id == "old-title"
    assert doc.title == "New Title"
    assert [p.name for p in (root / "favorites").iterdir()] == ["old-title.md"]


def test_update_without_changes_only_restamps(store):
    created = store.create("Same", "body")
    doc = store.update("same", "favorites")
    assert doc.content == created.content
    assert TIMESTAMP.match(doc.updated_at)


def test_update_missing_raises(store):
    with pytest.raises(NotFoundError):
        store.update("ghost", "favorites", DocumentUpdate(title="x"))


def test_record_use_increments_by_one(store):
    store.create("Counter", "body")
    first = store.record_use("counter", "favorites")
    second = store.record_use("counter", "favorites")
    assert first.use_count == 1
    assert second.use_count == 2
    assert second.last_used_at == second.updated_at
    assert TIMESTAMP.match(second.last_used_at)
    assert store.get("counter", "favorites").use_count == 2


def test_record_use_on_file_with_byte_order_mark(store, root):
    path = root / "favorites" / "code-review.md"
    path.write_bytes(
        b"\xef\xbb\xbf---\ntitle: \"Code Review\"\nuse_count: 5\n"
        b"created_at: 2026-01-01T00:00:00Z\n---\n\nBody"
    )
    doc = store.record_use("code-review", "favorites")
    assert doc.use_count == 6
    assert doc.title == "Code Review"
    assert doc.content == "Body"
    assert doc.created_at == "2026-01-01T00:00:00Z"
    assert not path.read_bytes().startswith(b"\xef\xbb\xbf")
    assert store.get("code-review", "favorites").use_count == 6


def test_record_use_missing_raises(store):
    with pytest.raises(NotFoundError):
        store.record_use("ghost", "templates")


def test_delete_removes_file(store, root):
    store.create("Gone", "body")
    store.delete("gone", "favorites")
    assert not (root / "favorites" / "gone.md").exists()
    assert store.list_all() == []


def test_delete_missing_is_ok(store):
    store.delete("never-existed", "favorites")
    store.delete("never-existed", "favorites")
