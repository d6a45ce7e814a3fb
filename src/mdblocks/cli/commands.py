"""CLI command implementations"""

import json
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Iterator, Optional

import typer
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from mdblocks.config import Settings, load_config
from mdblocks.core.errors import ContentLossError, MdBlocksError
from mdblocks.core.models import BlockList
from mdblocks.core.native import to_native
from mdblocks.core.pipeline import run_create, run_read, run_update
from mdblocks.core.reconcile import Policy, Position
from mdblocks.core.render import render_markdown
from mdblocks.core.transpile import CONTENT_TYPES, transpile
from mdblocks.crud.database import init_db, make_engine, reset_db
from mdblocks.crud.sql_store import SQLStore


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _read_source(path: str) -> str:
    """Read markdown from a file, or from stdin when path is '-'."""
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot read {path}", e)


@contextmanager
def _store(settings: Settings) -> Iterator[SQLStore]:
    """Yield a SQLStore; commit only if the block exits without error.

    Any error leaves the session uncommitted, so closing it rolls back every
    delete and append made inside the block.
    """
    try:
        engine = make_engine(settings.db_url)
        init_db(engine)
        with Session(engine) as session:
            yield SQLStore(session)
            session.commit()
    except SQLAlchemyError as e:
        _fail("Database error", e)


def transpile_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file, or '-' for stdin")],
    native: Annotated[bool, typer.Option("--native", help="Emit native store blocks")] = False,
    ):
    """Print the blocks parsed from a markdown file as JSON."""
    blocks = transpile(_read_source(path))
    if native:
        typer.echo(json.dumps([to_native(b) for b in blocks], indent=2, ensure_ascii=False))
    else:
        typer.echo(BlockList.dump_json(blocks, indent=2, exclude_none=True).decode("utf-8"))


def render_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file, or '-' for stdin")],
    ):
    """Transpile then render a markdown file, printing the normalized markdown."""
    typer.echo(render_markdown(transpile(_read_source(path))), nl=False)


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def create_cmd(
    title: Annotated[str, typer.Argument(help="Document title")],
    path: Annotated[str, typer.Argument(help="Markdown file, or '-' for stdin")],
    parent: Annotated[Optional[str], typer.Option("--parent", help="Parent document id")] = None,
    ):
    """Create a document from a markdown file and print its id."""
    settings = _settings()
    markdown = _read_source(path)
    try:
        with _store(settings) as store:
            result = run_create(store, title, markdown, parent_id=parent, batch_size=settings.batch_size)
    except MdBlocksError as e:
        _fail(str(e))
    typer.echo(f"Created {result.doc_id} ({len(result.blocks)} blocks)")


def update_cmd(
    doc_id: Annotated[str, typer.Argument(help="Document id")],
    path: Annotated[str, typer.Argument(help="Markdown file, or '-' for stdin")],
    policy: Annotated[Optional[Policy], typer.Option("--policy", help="replace, append, or merge")] = None,
    position: Annotated[Optional[Position], typer.Option("--position", help="Merge position: start or end")] = None,
    content_type: Annotated[Optional[str], typer.Option("--type", help=f"One block per line: {', '.join(CONTENT_TYPES)}")] = None,
    ):
    """Apply markdown to an existing document under an update policy."""
    settings = _settings(overrides={"default_policy": policy, "default_position": position})
    markdown = _read_source(path)
    try:
        with _store(settings) as store:
            result = run_update(
                store, doc_id, markdown,
                policy=settings.default_policy,
                position=settings.default_position,
                batch_size=settings.batch_size,
                content_type=content_type,
            )
    except ContentLossError as e:
        # Rolled back by _store: the stored document is as it was before the update.
        _fail(f"Update of document {e.doc_id} failed; no changes were saved", e.__cause__)
    except (MdBlocksError, ValueError) as e:
        _fail(str(e))
    typer.echo(
        f"Updated {result.doc_id} ({result.policy.value}) - "
        f"{result.deleted} deleted, {len(result.blocks)} appended"
    )


def read_cmd(
    doc_id: Annotated[str, typer.Argument(help="Document id")],
    ):
    """Print a stored document as markdown."""
    settings = _settings()
    try:
        with _store(settings) as store:
            markdown = run_read(store, doc_id)
    except MdBlocksError as e:
        _fail(str(e))
    typer.echo(markdown, nl=False)


def list_cmd():
    """List stored documents."""
    settings = _settings()
    with _store(settings) as store:
        docs = store.list_documents()
    if not docs:
        typer.echo("No documents found in database.")
        raise typer.Exit(1)
    for d in docs:
        typer.echo(f"{d.id}  {d.title}")


def search_cmd(
    query: Annotated[str, typer.Argument(help="Text to look for in document titles")],
    limit: Annotated[int, typer.Option("--limit", min=1, help="Max results")] = 10,
    ):
    """Search documents by title."""
    settings = _settings()
    with _store(settings) as store:
        docs = store.search(query, limit=limit)
    if not docs:
        typer.echo(f'No documents found matching "{query}"')
        return
    typer.echo(f'Found {len(docs)} documents matching "{query}":\n')
    for d in docs:
        typer.echo(f"• {d.title}\n  Id: {d.id}")
