"""promptshelf CLI — prompt library backed by markdown files.

Commands:
    promptshelf init [--path DIR]     write config, create folders, install starters
    promptshelf where                 print the resolved storage root
    promptshelf list                  list prompts (filter by collection/tag/query)
    promptshelf show ID               print a prompt's body
    promptshelf add TITLE             create a prompt (body from --content or stdin)
    promptshelf edit ID               change title/content/tags/description
    promptshelf rm ID                 delete a prompt
    promptshelf use ID                print a prompt and bump its use count
    promptshelf seed                  reinstall missing starter templates
    promptshelf export DEST           zip the storage root into DEST
"""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from promptshelf.bootstrap import init_repository, seed_starter_documents
from promptshelf.config import ShelfConfig, default_config_path, init_config, load_config, set_storage_path
from promptshelf.document import encode_document
from promptshelf.errors import NotFoundError, ShelfError
from promptshelf.export import export_archive
from promptshelf.models import COLLECTIONS, FAVORITES, TEMPLATES, Document, DocumentUpdate
from promptshelf.paths import resolve_storage_root
from promptshelf.store import PromptStore

if TYPE_CHECKING:
    from collections.abc import Iterator

_LOG_FORMAT = "%(asctime)s %(name)s %(message)s"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@contextlib.contextmanager
def _shelf_errors() -> Iterator[None]:
    try:
        yield
    except ShelfError as exc:
        raise click.ClickException(str(exc)) from exc


def _config_path(ctx: click.Context) -> Path:
    return ctx.obj["config_path"]


def _load_cfg(ctx: click.Context) -> ShelfConfig:
    with _shelf_errors():
        return load_config(_config_path(ctx))


def _log_level(ctx: click.Context) -> int:
    """Configured log level. A broken config is reported by the subcommand, not here."""
    try:
        return load_config(_config_path(ctx)).log_level
    except ShelfError:
        return logging.WARNING


def _store(ctx: click.Context) -> PromptStore:
    cfg = _load_cfg(ctx)
    with _shelf_errors():
        return PromptStore.from_config(cfg)


def _locate(store: PromptStore, doc_id: str, collection: str | None) -> Document:
    """Find doc_id in collection, or in favorites then templates when collection is None."""
    for name in (collection,) if collection else COLLECTIONS:
        if store.exists(doc_id, name):
            return store.get(doc_id, name)
    where = collection or " or ".join(COLLECTIONS)
    msg = f"Prompt not found: {doc_id} ({where})"
    raise NotFoundError(msg)


collection_option = click.option(
    "--collection", "-c", default=None, type=click.Choice(COLLECTIONS),
    help="Collection (default: search favorites, then templates)",
)

# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="promptshelf")
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Config file (default: $PROMPTSHELF_CONFIG or the user config dir)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """promptshelf — local prompt library."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path or default_config_path()
    level = logging.DEBUG if verbose else _log_level(ctx)
    logging.basicConfig(level=level, format=_LOG_FORMAT)


# ---------------------------------------------------------------------------
# promptshelf init / where / seed
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--path", "storage_path", default=None, help="Storage root (absolute or ~/...)")
@click.pass_context
def init(ctx: click.Context, storage_path: str | None) -> None:
    """Write the config file, create collection folders and install starters."""
    config_path = _config_path(ctx)
    with _shelf_errors():
        if storage_path is not None:
            # Validate before persisting so a bad path never lands in the config
            resolve_storage_root(storage_path)
            set_storage_path(config_path, storage_path)
            click.echo(f"Storage path set in {config_path}")
        else:
            try:
                init_config(config_path)
                click.echo(f"Created {config_path}")
            except FileExistsError:
                click.echo(f"{config_path.name} already exists — skipping")

        cfg = load_config(config_path)
        root = init_repository(resolve_storage_root(cfg.storage.path))

    click.echo(f"Storage root : {root}")
    for name in COLLECTIONS:
        click.echo(f"  {name:<10}: {root / name}")


@cli.command()
@click.pass_context
def where(ctx: click.Context) -> None:
    """Print the resolved storage root."""
    click.echo(str(_store(ctx).root))


@cli.command()
@click.pass_context
def seed(ctx: click.Context) -> None:
    """Install any starter templates that are missing. Never overwrites."""
    store = _store(ctx)
    with _shelf_errors():
        ids = seed_starter_documents(store.root / TEMPLATES)
    if ids:
        click.echo(f"Installed: {', '.join(ids)}")
    else:
        click.echo("All starter templates already present")


# ---------------------------------------------------------------------------
# promptshelf list / show
# ---------------------------------------------------------------------------


@cli.command("list")
@collection_option
@click.option("--tag", "-t", default=None, help="Only prompts carrying this tag")
@click.option("--query", "-q", default=None, help="Case-insensitive text filter")
@click.option("--plain", is_flag=True, help="One line per prompt, no table")
@click.pass_context
def list_cmd(
    ctx: click.Context, collection: str | None, tag: str | None, query: str | None, plain: bool,
) -> None:
    """List prompts, most used first."""
    store = _store(ctx)
    with _shelf_errors():
        docs = store.search(query, tag=tag, collection=collection)
    docs.sort(key=lambda d: (-d.use_count, d.title.casefold()))

    if not docs:
        click.echo("(no prompts)")
        return

    if plain:
        for d in docs:
            tags = f"  #{' #'.join(d.tags)}" if d.tags else ""
            click.echo(f"[{d.collection}/{d.id}]  {d.title}  ●{d.use_count}{tags}")
        return

    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    table = Table(show_header=True, header_style="bold")
    table.add_column("Collection", style="dim", no_wrap=True)
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Tags", style="cyan")
    table.add_column("Uses", justify="right")
    table.add_column("Last used", style="dim")
    for d in docs:
        table.add_row(
            d.collection,
            escape(d.id),
            escape(d.title),
            escape(", ".join(d.tags)),
            str(d.use_count),
            d.last_used_at or "",
        )
    Console().print(table)


@cli.command()
@click.argument("doc_id")
@collection_option
@click.option("--raw", is_flag=True, help="Print the full document including the header")
@click.pass_context
def show(ctx: click.Context, doc_id: str, collection: str | None, raw: bool) -> None:
    """Print a prompt's body."""
    store = _store(ctx)
    with _shelf_errors():
        doc = _locate(store, doc_id, collection)
    if raw:
        click.echo(encode_document(doc))
    else:
        click.echo(doc.content)


# ---------------------------------------------------------------------------
# promptshelf add / edit / rm / use
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("title")
@click.option("--content", default=None, help="Prompt body (default: read stdin)")
@click.option("--tag", "-t", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--description", "-d", default=None)
@click.option(
    "--collection", "-c", default=FAVORITES, show_default=True, type=click.Choice(COLLECTIONS),
)
@click.pass_context
def add(
    ctx: click.Context,
    title: str,
    content: str | None,
    tags: tuple[str, ...],
    description: str | None,
    collection: str,
) -> None:
    """Create a prompt. The id is derived from TITLE.

    \b
    promptshelf add "Code Review" --content "Review this diff" -t review
    pbpaste | promptshelf add "Release notes" -c templates
    """
    if content is None:
        content = click.get_text_stream("stdin").read()
    store = _store(ctx)
    with _shelf_errors():
        doc = store.create(title, content.strip(), tags, description, collection)
    click.echo(f"Created [{doc.collection}/{doc.id}] {doc.title}")


@cli.command()
@click.argument("doc_id")
@collection_option
@click.option("--title", default=None)
@click.option("--content", default=None)
@click.option("--tag", "-t", "tags", multiple=True, help="Replace tags (repeatable)")
@click.option("--clear-tags", is_flag=True, help="Remove all tags")
@click.option("--description", "-d", default=None)
@click.pass_context
def edit(
    ctx: click.Context,
    doc_id: str,
    collection: str | None,
    title: str | None,
    content: str | None,
    tags: tuple[str, ...],
    clear_tags: bool,
    description: str | None,
) -> None:
    """Update fields of a prompt; omitted fields are kept."""
    changes = DocumentUpdate(
        title=title,
        content=content,
        tags=[] if clear_tags else (list(tags) if tags else None),
        description=description,
    )
    if changes.is_empty:
        raise click.UsageError("Nothing to update — pass --title, --content, --tag or --description")
    store = _store(ctx)
    with _shelf_errors():
        doc = _locate(store, doc_id, collection)
        doc = store.update(doc.id, doc.collection, changes)
    click.echo(f"Updated [{doc.collection}/{doc.id}]")


@cli.command()
@click.argument("doc_id")
@collection_option
@click.pass_context
def rm(ctx: click.Context, doc_id: str, collection: str | None) -> None:
    """Delete a prompt. Deleting a missing prompt is not an error."""
    store = _store(ctx)
    with _shelf_errors():
        try:
            doc = _locate(store, doc_id, collection)
        except NotFoundError:
            click.echo(f"[{doc_id}] not present — nothing to delete")
            return
        store.delete(doc.id, doc.collection)
    click.echo(f"Deleted [{doc.collection}/{doc.id}]")


@cli.command()
@click.argument("doc_id")
@collection_option
@click.pass_context
def use(ctx: click.Context, doc_id: str, collection: str | None) -> None:
    """Print a prompt's body and record the use."""
    store = _store(ctx)
    with _shelf_errors():
        doc = _locate(store, doc_id, collection)
        doc = store.record_use(doc.id, doc.collection)
    click.echo(doc.content)


# ---------------------------------------------------------------------------
# promptshelf export
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("dest", type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
def export(ctx: click.Context, dest: Path) -> None:
    """Zip the whole storage root into DEST."""
    store = _store(ctx)
    with _shelf_errors():
        archive = export_archive(store.root, dest)
    click.echo(str(archive))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
