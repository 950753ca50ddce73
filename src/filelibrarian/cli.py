from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import default_state_db_path
from .file_record import FileRecord
from .library import Library
from .models import CompareState, SizeUnit
from .state_db import load_library, save_library

app = typer.Typer(
    help="Track a working set of files, tag them and compare their contents",
    no_args_is_help=True,
)
console = Console()

_STATE_STYLES = {
    CompareState.IDENTICAL: "green",
    CompareState.CONTENT_MATCH: "yellow",
    CompareState.DIFFERENT: "red",
}


@dataclass
class CliState:
    state_db: Path


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _open_library(ctx: typer.Context) -> Library:
    return Library.from_saved(load_library(_state(ctx).state_db))


def _save(ctx: typer.Context, library: Library) -> None:
    save_library(_state(ctx).state_db, library.to_saved())


def _require(library: Library, path: Path) -> FileRecord:
    record = library.get(path)
    if record is None:
        console.print(
            f"[red]Not tracked:[/red] {escape(str(path))}", soft_wrap=True
        )
        raise typer.Exit(1)
    return record


def _format_kb(record: FileRecord) -> str:
    try:
        return f"{record.size_in(SizeUnit.KB):.1f} KB"
    except FileNotFoundError:
        return "[red]missing[/red]"


@app.callback()
def _main(
    ctx: typer.Context,
    state_db: Path | None = typer.Option(
        None,
        help="SQLite file holding the tracked files (default: ~/.filelibrarian/library.sqlite3)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    _configure_logging(verbose)
    resolved = (
        state_db.expanduser().resolve()
        if state_db is not None
        else default_state_db_path()
    )
    ctx.obj = CliState(state_db=resolved)


@app.command()
def add(
    ctx: typer.Context,
    paths: list[Path] = typer.Argument(..., help="Files or directories to track"),
) -> None:
    """Track files, or every file under the given directories."""
    library = _open_library(ctx)
    before = len(library)
    for path in paths:
        if path.is_dir():
            library.add_tree(path)
        elif path.is_file():
            library.add(path)
        else:
            console.print(
                f"[red]Path not found:[/red] {escape(str(path))}", soft_wrap=True
            )
            raise typer.Exit(1)
    _save(ctx, library)
    console.print(
        f"Added {len(library) - before} files. {library.status_line()}", soft_wrap=True
    )


@app.command()
def drop(
    ctx: typer.Context,
    paths: list[Path] = typer.Argument(..., help="Tracked files to forget"),
) -> None:
    """Stop tracking files."""
    library = _open_library(ctx)
    dropped = sum(1 for path in paths if library.drop(path))
    _save(ctx, library)
    console.print(
        f"Dropped {dropped} files. {library.status_line()}", soft_wrap=True
    )


@app.command()
def tag(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Tag to apply"),
    paths: list[Path] = typer.Argument(..., help="Tracked files to tag"),
) -> None:
    """Tag tracked files."""
    library = _open_library(ctx)
    for path in paths:
        _require(library, path).add_tag(name)
    _save(ctx, library)
    console.print(f"Tagged {len(paths)} files with '{escape(name)}'.")


@app.command("list")
def list_files(
    ctx: typer.Context,
    tag_filter: str | None = typer.Option(None, "--tag", help="Only files with this tag"),
) -> None:
    """List tracked files."""
    library = _open_library(ctx)
    records = (
        library.with_tag(tag_filter)
        if tag_filter is not None
        else library.sorted_by_position()
    )
    table = Table("Path", "Size", "Tags")
    for record in records:
        table.add_row(
            escape(str(record.path)),
            _format_kb(record),
            escape(", ".join(record.tags)),
        )
    console.print(table)


@app.command()
def find(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Substring to look for"),
    content: bool = typer.Option(
        False, "--content", help="Search file content instead of file names"
    ),
    ignore_case: bool = typer.Option(False, "--ignore-case", "-i"),
) -> None:
    """Find tracked files by name or content."""
    library = _open_library(ctx)
    try:
        if content:
            matches = library.containing(text, ignore_case=ignore_case)
        else:
            matches = library.matching_filename(text, ignore_case=ignore_case)
    except FileNotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]", soft_wrap=True)
        raise typer.Exit(1)
    if content:
        # Loaded content is kept for later runs.
        _save(ctx, library)
    for record in matches:
        console.print(str(record.path), markup=False, soft_wrap=True)
    console.print(f"{len(matches)} matching files.")


@app.command()
def compare(
    ctx: typer.Context,
    first: Path = typer.Argument(..., help="Tracked file"),
    second: Path = typer.Argument(..., help="Tracked file to compare against"),
    keep_empty_lines: bool = typer.Option(
        False, "--keep-empty-lines", help="Treat empty lines as content"
    ),
) -> None:
    """Summarise how two tracked files differ."""
    library = _open_library(ctx)
    this = _require(library, first)
    other = _require(library, second)
    try:
        summary = this.compare_with(other, ignore_empty_lines=not keep_empty_lines)
    except FileNotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]", soft_wrap=True)
        raise typer.Exit(1)
    _save(ctx, library)
    result = this.last_compare_result(other)
    style = _STATE_STYLES[result.state] if result is not None else "white"
    console.print(summary, style=style, markup=False, soft_wrap=True)


@app.command()
def status(ctx: typer.Context) -> None:
    """Show how many files and directories are tracked."""
    console.print(_open_library(ctx).status_line(), soft_wrap=True)


if __name__ == "__main__":
    app()
